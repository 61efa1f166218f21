"""所持武将(user_officers)・所持戦法(user_skills)テーブルのリポジトリモジュール."""

import logging
from collections.abc import Mapping, Sequence
from typing import Annotated, Any, cast

from fastapi import Depends
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.database import get_async_db_session
from shinsen_advisor.database.model.ownership import UserOfficer, UserSkill

logger = logging.getLogger(__name__)


class OwnershipRepository:
    """所持状況テーブルへのデータアクセスを提供するリポジトリ.

    Attributes
    ----------
        session: 非同期DBセッション

    """

    def __init__(self, session: AsyncSession) -> None:
        """OwnershipRepositoryを初期化.

        Args:
        ----
            session: 非同期DBセッション

        """
        self.session = session

    # --- 所持武将 ---

    async def get_officer_counts(self, user_key: str) -> dict[int, int]:
        """ユーザーの武将ごとの所持枚数を取得.

        Args:
        ----
            user_key: ユーザー名

        Returns:
        -------
            武将ID -> 所持枚数 の辞書

        """
        stmt = select(UserOfficer).where(col(UserOfficer.user_key) == user_key)
        result = await self.session.exec(stmt)
        return {row.officer_id: row.count or 0 for row in result.all()}

    async def get_owned_officer_ids(self, user_key: str) -> list[int]:
        """所持枚数が1以上の武将IDを取得."""
        stmt = select(UserOfficer.officer_id).where(
            col(UserOfficer.user_key) == user_key,
            col(UserOfficer.count) > 0,
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def upsert_officer_counts(
        self,
        user_key: str,
        counts: Mapping[int, int],
    ) -> int:
        """武将の所持枚数を (user_key, officer_id) 単位で上書き保存.

        Args:
        ----
            user_key: ユーザー名
            counts: 武将ID -> 所持枚数

        Returns:
        -------
            保存した行数

        """
        rows = [
            {"user_key": user_key, "officer_id": officer_id, "count": count}
            for officer_id, count in counts.items()
        ]
        table = cast(Any, UserOfficer.__table__)  # type: ignore[attr-defined]
        return await self._upsert(
            table,
            rows,
            key_columns=[table.c.user_key, table.c.officer_id],
        )

    async def list_officer_user_keys(self) -> list[str]:
        """所持武将を登録したことのあるユーザー名を取得(重複なし)."""
        stmt = select(UserOfficer.user_key).distinct()
        result = await self.session.exec(stmt)
        return [key for key in result.all() if key]

    # --- 所持戦法 ---

    async def get_skill_counts(self, user_id: str) -> dict[int, int]:
        """ユーザーの戦法ごとの所持数を取得.

        Args:
        ----
            user_id: ユーザー名

        Returns:
        -------
            戦法ID -> 所持数 の辞書

        """
        stmt = select(UserSkill).where(col(UserSkill.user_id) == user_id)
        result = await self.session.exec(stmt)
        return {row.skill_id: row.count or 0 for row in result.all()}

    async def upsert_skill_counts(
        self,
        user_id: str,
        counts: Mapping[int, int],
    ) -> int:
        """戦法の所持数を (user_id, skill_id) 単位で上書き保存."""
        rows = [
            {"user_id": user_id, "skill_id": skill_id, "count": count}
            for skill_id, count in counts.items()
        ]
        table = cast(Any, UserSkill.__table__)  # type: ignore[attr-defined]
        return await self._upsert(
            table,
            rows,
            key_columns=[table.c.user_id, table.c.skill_id],
        )

    async def list_skill_user_ids(self) -> list[str]:
        """所持戦法を登録したことのあるユーザー名を取得(重複なし)."""
        stmt = select(UserSkill.user_id).distinct()
        result = await self.session.exec(stmt)
        return [key for key in result.all() if key]

    # --- プライベートメソッド ---

    async def _upsert(
        self,
        table: Any,
        rows: list[dict[str, Any]],
        *,
        key_columns: Sequence[Any],
    ) -> int:
        """複合キーで ON CONFLICT DO UPDATE する一括UPSERT."""
        if not rows:
            return 0

        stmt = pg_insert(table).values(rows)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(key_columns),
            set_={"count": stmt.excluded.count},
        )
        try:
            await self.session.exec(stmt)  # type: ignore[call-overload]
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                f"{LogPrefix.ROSTER} {table.name} upsert failed: "
                "rows=%s message=%s",
                len(rows),
                str(e),
            )
            raise
        return len(rows)


async def get_ownership_repository(
    session: Annotated[AsyncSession, Depends(get_async_db_session)],
) -> OwnershipRepository:
    """FastAPI DI用のOwnershipRepositoryファクトリ.

    Returns
    -------
        OwnershipRepository

    """
    return OwnershipRepository(session)

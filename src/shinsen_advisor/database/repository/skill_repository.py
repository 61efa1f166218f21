"""Skillテーブルのリポジトリモジュール."""

import logging
from collections.abc import Sequence
from typing import Annotated, Any, cast

from fastapi import Depends
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.database import get_async_db_session
from shinsen_advisor.database.model.skill import Skill

logger = logging.getLogger(__name__)

UPSERT_COLUMNS = (
    "name",
    "category",
    "trigger_rate",
    "owner_name",
    "description",
    "inherit1_name",
    "inherit2_name",
)


class SkillRepository:
    """Skillテーブルへのデータアクセスを提供するリポジトリ.

    Attributes
    ----------
        session: 非同期DBセッション

    """

    def __init__(self, session: AsyncSession) -> None:
        """SkillRepositoryを初期化.

        Args:
        ----
            session: 非同期DBセッション

        """
        self.session = session

    async def get_general(self) -> Sequence[Skill]:
        """固有戦法(owner_name が設定されたもの)を除いた戦法を名前順で取得.

        Returns
        -------
            Skillオブジェクトのリスト

        """
        stmt = (
            select(Skill)
            .where(col(Skill.owner_name).is_(None))
            .order_by(col(Skill.name).asc())
        )
        result = await self.session.exec(stmt)
        return result.all()

    async def bulk_upsert(self, records: list[Skill]) -> int:
        """戦法マスタを一括登録・更新.

        Args:
        ----
            records: 登録するSkillのリスト

        Returns:
        -------
            登録・更新したレコード数

        Raises:
        ------
            SQLAlchemyError: DB登録エラー時

        """
        if not records:
            return 0

        rows = [self._to_upsert_row(record) for record in records]
        try:
            await self.session.exec(self._build_upsert_statement(rows))  # type: ignore[call-overload]
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                f"{LogPrefix.IMPORT_MASTER} skills upsert failed: "
                "rows=%s message=%s",
                len(rows),
                str(e),
            )
            raise
        return len(rows)

    def _to_upsert_row(self, record: Skill) -> dict[str, Any]:
        """SkillモデルをUPSERT用辞書へ変換."""
        row = {name: getattr(record, name) for name in UPSERT_COLUMNS}
        row["id"] = record.id
        return row

    def _build_upsert_statement(self, rows: list[dict[str, Any]]) -> Any:
        """ON CONFLICT (id) DO UPDATE 付きINSERT文を構築."""
        table = cast(Any, Skill.__table__)  # type: ignore[attr-defined]
        stmt = pg_insert(table).values(rows)
        return stmt.on_conflict_do_update(
            index_elements=[table.c.id],
            set_={name: stmt.excluded[name] for name in UPSERT_COLUMNS},
        )


async def get_skill_repository(
    session: Annotated[AsyncSession, Depends(get_async_db_session)],
) -> SkillRepository:
    """FastAPI DI用のSkillRepositoryファクトリ.

    Returns
    -------
        SkillRepository

    """
    return SkillRepository(session)

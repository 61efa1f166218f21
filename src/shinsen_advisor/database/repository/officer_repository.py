"""Officerテーブルのリポジトリモジュール."""

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
from shinsen_advisor.database.model.officer import Officer

logger = logging.getLogger(__name__)

UPSERT_COLUMNS = (
    "name",
    "rarity",
    "cost_raw",
    "faction",
    "house",
    "inherent_skill_name",
    "inherent_skill_type",
    "inheritable_skill_name",
    "trait1",
    "trait2",
)


class OfficerRepository:
    """Officerテーブルへのデータアクセスを提供するリポジトリ.

    Attributes
    ----------
        session: 非同期DBセッション

    """

    def __init__(self, session: AsyncSession) -> None:
        """OfficerRepositoryを初期化.

        Args:
        ----
            session: 非同期DBセッション

        """
        self.session = session

    async def get_all(self) -> Sequence[Officer]:
        """全武将をレア度降順・コスト昇順・名前昇順で取得.

        Returns
        -------
            Officerオブジェクトのリスト

        """
        stmt = select(Officer).order_by(
            col(Officer.rarity).desc(),
            col(Officer.cost_raw).asc(),
            col(Officer.name).asc(),
        )
        result = await self.session.exec(stmt)
        return result.all()

    async def get_by_ids(self, officer_ids: Sequence[int]) -> Sequence[Officer]:
        """指定IDの武将をレア度降順・名前昇順で取得.

        Args:
        ----
            officer_ids: 武将IDのリスト

        Returns:
        -------
            Officerオブジェクトのリスト

        """
        if not officer_ids:
            return []

        stmt = (
            select(Officer)
            .where(col(Officer.id).in_(list(officer_ids)))
            .order_by(col(Officer.rarity).desc(), col(Officer.name).asc())
        )
        result = await self.session.exec(stmt)
        return result.all()

    async def bulk_upsert(self, records: list[Officer]) -> int:
        """武将マスタを一括登録・更新.

        Args:
        ----
            records: 登録するOfficerのリスト

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
                f"{LogPrefix.IMPORT_MASTER} officers upsert failed: "
                "rows=%s message=%s",
                len(rows),
                str(e),
            )
            raise
        return len(rows)

    def _to_upsert_row(self, record: Officer) -> dict[str, Any]:
        """OfficerモデルをUPSERT用辞書へ変換."""
        row = {name: getattr(record, name) for name in UPSERT_COLUMNS}
        row["id"] = record.id
        return row

    def _build_upsert_statement(self, rows: list[dict[str, Any]]) -> Any:
        """ON CONFLICT (id) DO UPDATE 付きINSERT文を構築."""
        table = cast(Any, Officer.__table__)  # type: ignore[attr-defined]
        stmt = pg_insert(table).values(rows)
        return stmt.on_conflict_do_update(
            index_elements=[table.c.id],
            set_={name: stmt.excluded[name] for name in UPSERT_COLUMNS},
        )


async def get_officer_repository(
    session: Annotated[AsyncSession, Depends(get_async_db_session)],
) -> OfficerRepository:
    """FastAPI DI用のOfficerRepositoryファクトリ.

    Returns
    -------
        OfficerRepository

    """
    return OfficerRepository(session)

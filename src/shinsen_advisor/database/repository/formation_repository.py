"""編成(formations / formation_slots)テーブルのリポジトリモジュール."""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Annotated, Any, cast

from fastapi import Depends
from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.database import get_async_db_session
from shinsen_advisor.database.model.formation import Formation, FormationSlot

logger = logging.getLogger(__name__)


class FormationRepository:
    """編成テーブルへのデータアクセスを提供するリポジトリ.

    書き込み系メソッドはコミットしない。保存処理全体を1トランザクションに
    まとめるため、コミット・ロールバックは呼び出し側が ``commit`` /
    ``rollback`` で行う。

    Attributes
    ----------
        session: 非同期DBセッション

    """

    def __init__(self, session: AsyncSession) -> None:
        """FormationRepositoryを初期化.

        Args:
        ----
            session: 非同期DBセッション

        """
        self.session = session

    async def list_headers_by_owner(self, owner_key: str) -> Sequence[Formation]:
        """相談者宛の編成ヘッダーを全編成者分取得.

        Args:
        ----
            owner_key: 相談者のユーザー名

        Returns:
        -------
            Formationオブジェクトのリスト

        """
        stmt = select(Formation).where(col(Formation.owner_key) == owner_key)
        result = await self.session.exec(stmt)
        return result.all()

    async def get_header(
        self,
        owner_key: str,
        advisor_key: str,
        label: str,
    ) -> Formation | None:
        """(相談者, 編成者, ラベル) で編成ヘッダーを1件取得."""
        stmt = select(Formation).where(
            col(Formation.owner_key) == owner_key,
            col(Formation.advisor_key) == advisor_key,
            col(Formation.label) == label,
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def get_slots(self, formation_id: int) -> Sequence[FormationSlot]:
        """編成IDに紐づく枠を取得."""
        stmt = select(FormationSlot).where(
            col(FormationSlot.formation_id) == formation_id
        )
        result = await self.session.exec(stmt)
        return result.all()

    async def list_user_keys(self) -> list[str]:
        """編成の user_key に登場するユーザー名を取得(重複なし)."""
        stmt = select(Formation.user_key).distinct()
        result = await self.session.exec(stmt)
        return [key for key in result.all() if key]

    async def upsert_header(self, formation: Formation) -> int | None:
        """編成ヘッダーをUPSERTしてIDを返す.

        IDが既知ならIDをキーに、未保存なら (owner_key, advisor_key, label)
        をキーにして上書きする。

        Args:
        ----
            formation: 保存する編成ヘッダー

        Returns:
        -------
            保存された編成のID

        Raises:
        ------
            SQLAlchemyError: DB登録エラー時

        """
        stmt = self._build_upsert_header_statement(formation)
        try:
            result = await self.session.exec(stmt)  # type: ignore[call-overload]
        except SQLAlchemyError as e:
            self._log_sql_error(context="upsert_header", error=e)
            raise
        return cast(int | None, result.scalar_one_or_none())

    async def delete_slots(self, formation_id: int) -> None:
        """編成IDに紐づく枠をすべて削除."""
        table = cast(Any, FormationSlot.__table__)  # type: ignore[attr-defined]
        stmt = delete(table).where(table.c.formation_id == formation_id)
        try:
            await self.session.exec(stmt)  # type: ignore[call-overload]
        except SQLAlchemyError as e:
            self._log_sql_error(context="delete_slots", error=e)
            raise

    async def insert_slots(self, slots: Sequence[FormationSlot]) -> None:
        """編成の枠を一括登録."""
        if not slots:
            return

        rows = [
            {
                "formation_id": slot.formation_id,
                "position": slot.position,
                "officer_id": slot.officer_id,
                "inherit_skill1_id": slot.inherit_skill1_id,
                "inherit_skill2_id": slot.inherit_skill2_id,
            }
            for slot in slots
        ]
        table = cast(Any, FormationSlot.__table__)  # type: ignore[attr-defined]
        try:
            await self.session.exec(pg_insert(table).values(rows))  # type: ignore[call-overload]
        except SQLAlchemyError as e:
            self._log_sql_error(context="insert_slots", error=e)
            raise

    async def commit(self) -> None:
        """現在のトランザクションをコミット."""
        await self.session.commit()

    async def rollback(self) -> None:
        """現在のトランザクションをロールバック."""
        await self.session.rollback()

    def _build_upsert_header_statement(self, formation: Formation) -> Any:
        """編成ヘッダーのUPSERT文(RETURNING id 付き)を構築."""
        table = cast(Any, Formation.__table__)  # type: ignore[attr-defined]
        values: dict[str, Any] = {
            "owner_key": formation.owner_key,
            "advisor_key": formation.advisor_key,
            "user_key": formation.user_key or formation.owner_key,
            "label": formation.label,
            "request_comment": formation.request_comment,
            "answer_comment": formation.answer_comment,
            "updated_at": datetime.now(UTC),
        }
        if formation.id is not None:
            values["id"] = formation.id
            conflict_keys = [table.c.id]
        else:
            conflict_keys = [
                table.c.owner_key,
                table.c.advisor_key,
                table.c.label,
            ]

        stmt = pg_insert(table).values(values)
        return stmt.on_conflict_do_update(
            index_elements=conflict_keys,
            set_={
                name: stmt.excluded[name]
                for name in values
                if name != "id"
            },
        ).returning(table.c.id)

    def _log_sql_error(self, *, context: str, error: SQLAlchemyError) -> None:
        """SQL実行エラーをログ出力."""
        orig = getattr(error, "orig", None)
        logger.error(
            f"{LogPrefix.FORMATION_SAVE} error context=%s sqlstate=%s message=%s",
            context,
            getattr(orig, "sqlstate", None),
            str(error),
        )


async def get_formation_repository(
    session: Annotated[AsyncSession, Depends(get_async_db_session)],
) -> FormationRepository:
    """FastAPI DI用のFormationRepositoryファクトリ.

    Returns
    -------
        FormationRepository

    """
    return FormationRepository(session)

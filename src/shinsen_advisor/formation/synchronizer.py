"""編成エディタの状態を永続化先へ反映するモジュール."""

import logging
from collections.abc import Awaitable, Mapping
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError

from shinsen_advisor.common.exceptions import FormationSyncError
from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.model.formation import Formation, FormationSlot
from shinsen_advisor.formation.protocol import FormationStore
from shinsen_advisor.formation.slots import POSITIONS, SlotPosition, SlotState

logger = logging.getLogger(__name__)

R = TypeVar("R")

STEP_UPSERT_HEADER = "upsert_header"
STEP_DELETE_SLOTS = "delete_slots"
STEP_INSERT_SLOTS = "insert_slots"
STEP_COMMIT = "commit"


def build_slot_rows(
    formation_id: int,
    slots: Mapping[SlotPosition, SlotState],
) -> list[FormationSlot]:
    """武将が設定された枠だけを保存用の行にする(枠の定義順)."""
    rows = []
    for position in POSITIONS:
        slot = slots.get(position)
        if slot is None or slot.officer_id is None:
            continue
        rows.append(
            FormationSlot(
                formation_id=formation_id,
                position=position.value,
                officer_id=slot.officer_id,
                inherit_skill1_id=slot.inherit1_id,
                inherit_skill2_id=slot.inherit2_id,
            )
        )
    return rows


class FormationSynchronizer:
    """編成ヘッダーと枠の保存を行う.

    ヘッダーのUPSERT、既存枠の削除、現在の枠の登録を順に行う。
    3ステップは1トランザクションで実行し、どこかで失敗したら
    ステップごとのメッセージ付きで ``FormationSyncError`` を送出して
    全体をロールバックする。

    Attributes
    ----------
        store: 永続化先

    """

    def __init__(self, store: FormationStore) -> None:
        self.store = store

    async def persist(
        self,
        header: Formation,
        slots: Mapping[SlotPosition, SlotState],
    ) -> int:
        """編成を保存して編成IDを返す.

        Args:
        ----
            header: 編成ヘッダー(未保存なら id は None)
            slots: 枠の状態

        Returns:
        -------
            保存された編成のID

        Raises:
        ------
            FormationSyncError: いずれかのステップの失敗時

        """
        try:
            formation_id = await self._step(
                STEP_UPSERT_HEADER,
                "formations保存エラー",
                self.store.upsert_header(header),
            )
            if not formation_id:
                raise FormationSyncError(
                    STEP_UPSERT_HEADER, "formationsのID取得に失敗しました"
                )

            await self._step(
                STEP_DELETE_SLOTS,
                "古いスロット削除エラー",
                self.store.delete_slots(formation_id),
            )

            rows = build_slot_rows(formation_id, slots)
            await self._step(
                STEP_INSERT_SLOTS,
                "formation_slots保存エラー",
                self.store.insert_slots(rows),
            )

            await self._step(
                STEP_COMMIT,
                "formations保存エラー",
                self.store.commit(),
            )
        except FormationSyncError as e:
            logger.error(
                f"{LogPrefix.FORMATION_SAVE} failed step={e.step} "
                f"owner={header.owner_key} advisor={header.advisor_key} "
                f"label={header.label}: {e.message}"
            )
            await self.store.rollback()
            raise

        logger.info(
            f"{LogPrefix.FORMATION_SAVE} saved id={formation_id} "
            f"owner={header.owner_key} advisor={header.advisor_key} "
            f"label={header.label} slots={len(rows)}"
        )
        return formation_id

    async def _step(self, step: str, error_label: str, operation: Awaitable[R]) -> R:
        """1ステップを実行し、失敗時はステップ名付きの例外にする."""
        try:
            return await operation
        except SQLAlchemyError as e:
            raise FormationSyncError(step, f"{error_label}: {e}") from e

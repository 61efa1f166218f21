"""編成の永続化先のプロトコル定義."""

from collections.abc import Sequence
from typing import Protocol

from shinsen_advisor.database.model.formation import Formation, FormationSlot


class FormationStore(Protocol):
    """編成ヘッダー・枠の読み書きのインターフェース.

    書き込み系はコミットせず、``commit`` / ``rollback`` で確定・破棄する。
    """

    async def list_headers_by_owner(self, owner_key: str) -> Sequence[Formation]:
        """相談者宛の編成ヘッダーを取得."""
        ...

    async def get_header(
        self,
        owner_key: str,
        advisor_key: str,
        label: str,
    ) -> Formation | None:
        """編成ヘッダーを1件取得."""
        ...

    async def get_slots(self, formation_id: int) -> Sequence[FormationSlot]:
        """編成の枠を取得."""
        ...

    async def upsert_header(self, formation: Formation) -> int | None:
        """編成ヘッダーをUPSERTしてIDを返す."""
        ...

    async def delete_slots(self, formation_id: int) -> None:
        """編成の枠をすべて削除."""
        ...

    async def insert_slots(self, slots: Sequence[FormationSlot]) -> None:
        """編成の枠を登録."""
        ...

    async def commit(self) -> None:
        """確定."""
        ...

    async def rollback(self) -> None:
        """破棄."""
        ...

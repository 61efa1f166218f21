"""編成の枠(主将・副将1・副将2)の定義."""

from dataclasses import dataclass
from enum import Enum


class SlotPosition(str, Enum):
    """編成の枠. 定義順がそのまま表示・保存順になる."""

    LEADER = "leader"
    SUB1 = "sub1"
    SUB2 = "sub2"

    @property
    def display_name(self) -> str:
        """画面・コピー用の枠名."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    SlotPosition.LEADER: "主将",
    SlotPosition.SUB1: "副将1",
    SlotPosition.SUB2: "副将2",
}

POSITIONS: tuple[SlotPosition, ...] = tuple(SlotPosition)


@dataclass(frozen=True)
class SlotState:
    """1枠分の状態.

    Attributes
    ----------
        officer_id: 武将ID
        inherit1_id: 伝授戦法1のID
        inherit2_id: 伝授戦法2のID

    """

    officer_id: int | None = None
    inherit1_id: int | None = None
    inherit2_id: int | None = None

    @property
    def is_empty(self) -> bool:
        """武将も戦法も設定されていないか."""
        return (
            self.officer_id is None
            and self.inherit1_id is None
            and self.inherit2_id is None
        )


Slots = dict[SlotPosition, SlotState]


def empty_slots() -> Slots:
    """全枠が空の状態を返す."""
    return {position: SlotState() for position in POSITIONS}

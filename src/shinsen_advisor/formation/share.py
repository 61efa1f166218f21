"""編成内容を共有用テキストに整形してコピーする."""

import logging
from collections.abc import Iterable, Mapping
from typing import TypeVar

from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.model.officer import Officer
from shinsen_advisor.formation.protocol import Clipboard
from shinsen_advisor.formation.slots import POSITIONS, SlotPosition, SlotState
from shinsen_advisor.roster.index import RecordIndex
from shinsen_advisor.roster.skills import SkillView

logger = logging.getLogger(__name__)

NO_OWNER = "（相談者未選択）"
NO_OFFICER = "（武将未設定）"
PART_SEPARATOR = " ｜ "
SKILL_SEPARATOR = " / "

T = TypeVar("T", Officer, SkillView)


def format_for_copy(
    owner_key: str,
    advisor_label: str,
    label: str,
    slots: Mapping[SlotPosition, SlotState],
    officers: Mapping[int, Officer] | Iterable[Officer],
    skills: Mapping[int, SkillView] | Iterable[SkillView],
    request_comment: str = "",
    answer_comment: str = "",
) -> str:
    """編成をLINE等に貼り付けやすい複数行テキストにする.

    Example::

        【Alice さん宛 編成1】
        編成者: Bob

        - 主将: 織田信長 固有：天下布武 ｜ 伝授：啄木鳥 / 勇往邁進
        - 副将1: 羽柴秀吉

        依頼者コメント：よろしくお願いします

    武将も戦法も設定されていない枠は出力しない。
    """
    officer_index = _as_index(officers)
    skill_index = _as_index(skills)

    lines = [f"【{owner_key or NO_OWNER} さん宛 {label}】"]
    if advisor_label:
        lines.append(f"編成者: {advisor_label}")
    lines.append("")

    for position in POSITIONS:
        slot = slots.get(position)
        if slot is None or slot.is_empty:
            continue

        officer = (
            officer_index.get(slot.officer_id) if slot.officer_id is not None else None
        )
        head = f"{position.display_name}: {officer.name if officer else NO_OFFICER}"
        if officer is not None and officer.inherent_skill_name:
            head = f"{head} 固有：{officer.inherent_skill_name}"
        parts = [head]

        inherit_names = [
            skill_index[skill_id].name
            for skill_id in (slot.inherit1_id, slot.inherit2_id)
            if skill_id is not None and skill_id in skill_index
        ]
        if inherit_names:
            parts.append(f"伝授：{SKILL_SEPARATOR.join(inherit_names)}")

        lines.append(f"- {PART_SEPARATOR.join(parts)}")

    if request_comment:
        lines.extend(["", f"依頼者コメント：{request_comment}"])
    if answer_comment:
        lines.extend(["", f"回答者コメント：{answer_comment}"])

    return "\n".join(lines)


def copy_formation_text(text: str, clipboard: Clipboard) -> bool:
    """整形済みテキストをクリップボードへコピーし、成否を返す."""
    ok = clipboard.write_text(text)
    if ok:
        logger.info(f"{LogPrefix.EXPORT} copied {len(text)} chars to clipboard")
    else:
        logger.warning(f"{LogPrefix.EXPORT} clipboard is not available")
    return ok


def _as_index(records: Mapping[int, T] | Iterable[T]) -> Mapping[int, T]:
    if isinstance(records, Mapping):
        return records
    return RecordIndex(records)

"""共有用テキストとクリップボードのテスト."""

import io
from unittest.mock import MagicMock, patch

from shinsen_advisor.database.model import Officer, Skill
from shinsen_advisor.formation.share import copy_formation_text, format_for_copy
from shinsen_advisor.formation.slots import SlotPosition, SlotState, empty_slots
from shinsen_advisor.infra.external.clipboard import SystemClipboard
from shinsen_advisor.roster.skills import annotate_skills


class TestFormatForCopy:
    """format_for_copy のテスト."""

    def _format(self, officers: list[Officer], skills: list[Skill], **kwargs) -> str:
        slots = empty_slots()
        slots[SlotPosition.LEADER] = SlotState(1, 10, None)
        params = {
            "owner_key": "Alice",
            "advisor_label": "Bob",
            "label": "編成1",
            "slots": slots,
            "officers": officers,
            "skills": annotate_skills(skills, set(), officers),
        }
        params.update(kwargs)
        return format_for_copy(**params)

    def test_header_and_leader_line(
        self, officers: list[Officer], skills: list[Skill]
    ) -> None:
        lines = self._format(officers, skills).split("\n")

        assert lines == [
            "【Alice さん宛 編成1】",
            "編成者: Bob",
            "",
            "- 主将: Nobunaga 固有：Atsumori ｜ 伝授：Kachidoki",
        ]

    def test_all_positions_and_comments(
        self, officers: list[Officer], skills: list[Skill]
    ) -> None:
        slots = {
            SlotPosition.LEADER: SlotState(1, 10, 11),
            SlotPosition.SUB1: SlotState(2, None, None),
            SlotPosition.SUB2: SlotState(None, 11, None),
        }
        text = self._format(
            officers,
            skills,
            slots=slots,
            request_comment="よろしく",
            answer_comment="どうぞ",
        )

        assert text.split("\n") == [
            "【Alice さん宛 編成1】",
            "編成者: Bob",
            "",
            "- 主将: Nobunaga 固有：Atsumori ｜ 伝授：Kachidoki / Kitsutsuki",
            "- 副将1: Hideyoshi",
            "- 副将2: （武将未設定） ｜ 伝授：Kitsutsuki",
            "",
            "依頼者コメント：よろしく",
            "",
            "回答者コメント：どうぞ",
        ]

    def test_without_inherent_skill(
        self, officers: list[Officer], skills: list[Skill]
    ) -> None:
        """固有戦法のない武将は伝授の前だけ区切る."""
        slots = {SlotPosition.SUB1: SlotState(3, 11, None)}

        lines = self._format(officers, skills, slots=slots).split("\n")

        assert lines[-1] == "- 副将1: Ieyasu ｜ 伝授：Kitsutsuki"

    def test_without_owner_and_advisor(
        self, officers: list[Officer], skills: list[Skill]
    ) -> None:
        lines = self._format(officers, skills, owner_key="", advisor_label="").split("\n")

        assert lines[0] == "【（相談者未選択） さん宛 編成1】"
        assert lines[1] == ""

    def test_unknown_ids(self, officers: list[Officer], skills: list[Skill]) -> None:
        """マスタにないIDの武将は未設定扱い、戦法は出力しない."""
        slots = {SlotPosition.LEADER: SlotState(999, 888, None)}

        lines = self._format(officers, skills, slots=slots).split("\n")

        assert lines[-1] == "- 主将: （武将未設定）"


class TestClipboard:
    """クリップボードへのコピーのテスト."""

    def test_copy_formation_text(self) -> None:
        clipboard = MagicMock()
        clipboard.write_text.return_value = True

        assert copy_formation_text("text", clipboard) is True
        clipboard.write_text.assert_called_once_with("text")

    def test_uses_first_available_command(self) -> None:
        clipboard = SystemClipboard(commands=(("missing",), ("pbcopy",)))

        with (
            patch(
                "shinsen_advisor.infra.external.clipboard.shutil.which",
                side_effect=lambda name: None if name == "missing" else f"/usr/bin/{name}",
            ),
            patch("shinsen_advisor.infra.external.clipboard.subprocess.run") as run,
        ):
            assert clipboard.write_text("信長") is True

        args, kwargs = run.call_args
        assert args[0] == ("pbcopy",)
        assert kwargs["input"] == "信長".encode()

    def test_osc52_fallback_on_tty(self) -> None:
        stream = MagicMock()
        stream.isatty.return_value = True
        clipboard = SystemClipboard(commands=(), stream=stream)

        assert clipboard.write_text("abc") is True
        stream.write.assert_called_once_with("\033]52;c;YWJj\a")

    def test_fails_without_tty(self) -> None:
        """コマンドも端末もなければ失敗."""
        clipboard = SystemClipboard(commands=(), stream=io.StringIO())

        assert clipboard.write_text("abc") is False

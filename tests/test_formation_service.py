"""編成サービスのテスト."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from shinsen_advisor.common.exceptions import (
    EmptyFormationError,
    FormationLoadError,
)
from shinsen_advisor.database.model import Officer, Skill
from shinsen_advisor.formation.service import FormationService, resolve_owner
from shinsen_advisor.formation.slots import SlotPosition, SlotState
from shinsen_advisor.identity.store import UserContext
from shinsen_advisor.roster.index import RecordIndex
from shinsen_advisor.roster.service import Roster
from shinsen_advisor.roster.skills import annotate_skills
from tests.conftest import FakeFormationStore


class TestResolveOwner:
    """resolve_owner のテスト."""

    def test_me(self, alice: UserContext) -> None:
        assert resolve_owner(["Alice", "Bob"], "me", alice) == "Alice"

    def test_named_owner(self, alice: UserContext) -> None:
        assert resolve_owner(["Alice", "Bob"], "Bob", alice) == "Bob"

    def test_unknown_name_falls_back_to_viewer(self, alice: UserContext) -> None:
        assert resolve_owner(["Alice", "Bob"], "Zed", alice) == "Alice"

    def test_viewer_not_owner_falls_back_to_first(self) -> None:
        viewer = UserContext(user_key="Carol")
        assert resolve_owner(["Alice", "Bob"], "me", viewer) == "Alice"

    def test_no_owners(self, alice: UserContext) -> None:
        assert resolve_owner([], "me", alice) is None


@pytest.fixture
def service(
    store: FakeFormationStore, officers: list[Officer], skills: list[Skill]
) -> FormationService:
    owned = [officers[0]]
    views = annotate_skills(skills, set(), owned)
    roster_service = AsyncMock()
    roster_service.load.return_value = Roster(
        user_key="Alice",
        owned_officers=owned,
        skills=views,
        officer_index=RecordIndex(owned),
        skill_index=RecordIndex(views),
    )
    ownership_repo = AsyncMock()
    ownership_repo.list_officer_user_keys.return_value = ["Bob", "Alice", "Bob"]
    return FormationService(store, ownership_repo, roster_service)


class TestFormationService:
    """FormationService のテスト."""

    async def test_list_owners(self, service: FormationService) -> None:
        assert await service.list_owners() == ["Alice", "Bob"]

    async def test_list_owners_failure(self, service: FormationService) -> None:
        service.ownership_repo.list_officer_user_keys.side_effect = SQLAlchemyError("x")  # type: ignore[attr-defined]

        with pytest.raises(FormationLoadError, match="相談者一覧取得エラー"):
            await service.list_owners()

    async def test_open_editor_defaults(
        self, service: FormationService, bob: UserContext
    ) -> None:
        """編成者・ラベル省略時は自分のタブの先頭ラベル."""
        editor = await service.open_editor(bob, "Alice")

        assert editor.advisor_key == "Bob"
        assert editor.label == "編成1"
        assert editor.advisors == ["Bob"]

    async def test_save_then_share(
        self, service: FormationService, bob: UserContext
    ) -> None:
        await service.save(
            bob,
            "Alice",
            "編成1",
            slots={SlotPosition.LEADER: SlotState(1, 10, None)},
            request_comment="相談です",
        )

        text = await service.share_text(
            UserContext(user_key="Alice"), "Alice", "Bob", "編成1"
        )

        assert text.split("\n") == [
            "【Alice さん宛 編成1】",
            "編成者: Bob",
            "",
            "- 主将: Nobunaga 固有：Atsumori ｜ 伝授：Kachidoki",
            "",
            "依頼者コメント：相談です",
        ]

    async def test_save_empty(
        self, service: FormationService, store: FakeFormationStore, bob: UserContext
    ) -> None:
        with pytest.raises(EmptyFormationError):
            await service.save(bob, "Alice", "編成1", slots={})

        assert "upsert_header" not in store.calls

    async def test_add_formation(
        self, service: FormationService, bob: UserContext
    ) -> None:
        await service.save(
            bob, "Alice", "編成1", slots={SlotPosition.LEADER: SlotState(1, None, None)}
        )

        editor = await service.add_formation(bob, "Alice")

        assert editor.label == "編成2"
        assert editor.formation_id is None

"""編成エディタのテスト."""

from unittest.mock import AsyncMock

import pytest

from shinsen_advisor.common.exceptions import (
    EmptyFormationError,
    FormationLimitError,
    FormationLoadError,
    FormationPermissionError,
    FormationSyncError,
    InvalidEditorStateError,
    InvalidLabelError,
    OwnerRequiredError,
)
from shinsen_advisor.database.model import Formation
from shinsen_advisor.formation.editor import EditorState, FormationEditor
from shinsen_advisor.formation.schema import FormationResponse
from shinsen_advisor.formation.slots import SlotPosition, SlotState
from shinsen_advisor.identity.store import UserContext
from tests.conftest import FakeFormationStore


async def _seed(store: FakeFormationStore, owner: str, advisor: str, labels: list[str]) -> None:
    for label in labels:
        await store.upsert_header(
            Formation(owner_key=owner, advisor_key=advisor, user_key=owner, label=label)
        )
    await store.commit()


class TestLoad:
    """読み込みのテスト."""

    async def test_initial_state(self, store: FakeFormationStore, bob: UserContext) -> None:
        editor = FormationEditor(store, bob)

        assert editor.state is EditorState.UNINITIALIZED
        with pytest.raises(InvalidEditorStateError):
            editor.set_officer(SlotPosition.LEADER, 1)

    async def test_load_labels_groups_by_advisor(
        self, store: FakeFormationStore, bob: UserContext
    ) -> None:
        await _seed(store, "Alice", "Carol", ["編成2", "編成1"])
        await _seed(store, "Alice", "Bob", ["編成1"])
        editor = FormationEditor(store, bob)

        labels = await editor.load_labels("Alice")

        assert labels == {"Carol": ["編成1", "編成2"], "Bob": ["編成1"]}
        assert editor.advisors == ["Bob", "Carol"]
        assert editor.labels_for("Dave") == ["編成1"]

    async def test_select_missing_formation_is_empty(
        self, store: FakeFormationStore, bob: UserContext
    ) -> None:
        """ヘッダーがなければ未保存の空の編成になる."""
        editor = FormationEditor(store, bob)

        await editor.select_formation("Alice", "Bob", "編成1")

        assert editor.state is EditorState.READY
        assert editor.formation_id is None
        assert all(slot.is_empty for slot in editor.slots.values())

    async def test_select_failure_returns_to_uninitialized(
        self, store: FakeFormationStore, bob: UserContext
    ) -> None:
        store.fail_on.add("get_header")
        editor = FormationEditor(store, bob)

        with pytest.raises(FormationLoadError, match="formations取得エラー"):
            await editor.select_formation("Alice", "Bob", "編成1")

        assert editor.state is EditorState.UNINITIALIZED

    async def test_load_labels_failure(
        self, store: FakeFormationStore, bob: UserContext
    ) -> None:
        store.fail_on.add("list_headers_by_owner")
        editor = FormationEditor(store, bob)

        with pytest.raises(FormationLoadError, match="formations一覧取得エラー"):
            await editor.load_labels("Alice")


class TestAddFormation:
    """編成追加のテスト."""

    async def test_adds_lowest_unused_label(
        self, store: FakeFormationStore, bob: UserContext
    ) -> None:
        await _seed(store, "Alice", "Bob", ["編成1", "編成2", "編成4"])
        editor = FormationEditor(store, bob)
        await editor.load_labels("Alice")
        await editor.select_formation("Alice", "Bob", "編成1")

        label = await editor.add_formation()

        assert label == "編成3"
        assert editor.label == "編成3"
        assert editor.state is EditorState.READY
        assert "編成3" in editor.label_map["Bob"]

    async def test_limit(self, store: FakeFormationStore, bob: UserContext) -> None:
        """5個あるとそれ以上追加できない."""
        await _seed(store, "Alice", "Bob", [f"編成{i}" for i in range(1, 6)])
        editor = FormationEditor(store, bob)
        await editor.load_labels("Alice")
        await editor.select_formation("Alice", "Bob", "編成1")

        with pytest.raises(FormationLimitError, match="最大 5 個"):
            await editor.add_formation()

    async def test_only_on_own_tab(
        self, store: FakeFormationStore, bob: UserContext
    ) -> None:
        editor = FormationEditor(store, bob)
        await editor.select_formation("Alice", "Carol", "編成1")

        with pytest.raises(FormationPermissionError):
            await editor.add_formation()

    async def test_requires_owner(self, store: FakeFormationStore, bob: UserContext) -> None:
        editor = FormationEditor(store, bob)

        with pytest.raises(OwnerRequiredError):
            await editor.add_formation()


class TestSave:
    """保存のテスト."""

    async def test_round_trip(self, store: FakeFormationStore, bob: UserContext) -> None:
        """保存した内容を選び直すと同じ枠が読み込まれる. 空の枠は空のまま."""
        editor = FormationEditor(store, bob)
        await editor.select_formation("Alice", "Bob", "編成1")
        editor.set_officer(SlotPosition.LEADER, 1)
        editor.set_inherited_skill(SlotPosition.LEADER, 1, 10)
        editor.set_inherited_skill(SlotPosition.LEADER, 2, 11)
        editor.set_officer(SlotPosition.SUB2, 3)
        editor.set_comments("よろしく", "どうぞ")

        formation_id = await editor.save()

        reloaded = FormationEditor(store, UserContext(user_key="Carol"))
        await reloaded.load_labels("Alice")
        await reloaded.select_formation("Alice", "Bob", "編成1")

        assert reloaded.formation_id == formation_id
        assert reloaded.slots[SlotPosition.LEADER] == SlotState(1, 10, 11)
        assert reloaded.slots[SlotPosition.SUB1] == SlotState()
        assert reloaded.slots[SlotPosition.SUB2] == SlotState(3, None, None)
        assert reloaded.request_comment == "よろしく"
        assert reloaded.answer_comment == "どうぞ"
        assert reloaded.label_map == {"Bob": ["編成1"]}

    async def test_resave_replaces_slots(
        self, store: FakeFormationStore, bob: UserContext
    ) -> None:
        editor = FormationEditor(store, bob)
        await editor.select_formation("Alice", "Bob", "編成1")
        editor.set_officer(SlotPosition.LEADER, 1)
        editor.set_officer(SlotPosition.SUB1, 2)
        first_id = await editor.save()

        editor.set_officer(SlotPosition.SUB1, None)
        second_id = await editor.save()

        assert first_id == second_id
        assert [s.position for s in store.slots[first_id]] == ["leader"]

    async def test_empty_formation_makes_no_store_call(self, bob: UserContext) -> None:
        """武将が1人もいなければ永続化先を呼ばない."""
        store = AsyncMock()
        store.get_header.return_value = None
        editor = FormationEditor(store, bob)
        await editor.select_formation("Alice", "Bob", "編成1")
        editor.set_inherited_skill(SlotPosition.LEADER, 1, 10)

        with pytest.raises(EmptyFormationError):
            await editor.save()

        store.upsert_header.assert_not_called()
        store.delete_slots.assert_not_called()
        store.insert_slots.assert_not_called()

    async def test_only_on_own_tab(self, store: FakeFormationStore, bob: UserContext) -> None:
        editor = FormationEditor(store, bob)
        await editor.select_formation("Alice", "Carol", "編成1")
        editor.set_officer(SlotPosition.LEADER, 1)

        with pytest.raises(FormationPermissionError, match="自分の編成者タブのみ"):
            await editor.save()

        assert "upsert_header" not in store.calls

    async def test_new_label_over_limit(
        self, store: FakeFormationStore, bob: UserContext
    ) -> None:
        await _seed(store, "Alice", "Bob", [f"編成{i}" for i in range(1, 6)])
        editor = FormationEditor(store, bob)
        await editor.load_labels("Alice")
        await editor.select_formation("Alice", "Bob", "編成6")
        editor.set_officer(SlotPosition.LEADER, 1)

        with pytest.raises(FormationLimitError):
            await editor.save()

    @pytest.mark.parametrize("label", ["編成9", "編成6", "編成0", "hello"])
    async def test_label_out_of_range(
        self, store: FakeFormationStore, bob: UserContext, label: str
    ) -> None:
        """編成1〜編成5 以外のラベルは保存しない."""
        editor = FormationEditor(store, bob)
        await editor.select_formation("Alice", "Bob", label)
        editor.set_officer(SlotPosition.LEADER, 1)

        with pytest.raises(InvalidLabelError):
            await editor.save()

        assert store.headers == {}
        assert "upsert_header" not in store.calls

    async def test_failure_returns_to_ready(
        self, store: FakeFormationStore, bob: UserContext
    ) -> None:
        editor = FormationEditor(store, bob)
        await editor.select_formation("Alice", "Bob", "編成1")
        editor.set_officer(SlotPosition.LEADER, 1)
        store.fail_on.add("insert_slots")

        with pytest.raises(FormationSyncError, match="formation_slots保存エラー"):
            await editor.save()

        assert editor.state is EditorState.READY
        assert editor.formation_id is None

    async def test_invalid_slot_index(
        self, store: FakeFormationStore, bob: UserContext
    ) -> None:
        editor = FormationEditor(store, bob)
        await editor.select_formation("Alice", "Bob", "編成1")

        with pytest.raises(ValueError):
            editor.set_inherited_skill(SlotPosition.LEADER, 3, 10)


def test_response_requires_selected_formation(
    store: FakeFormationStore, bob: UserContext
) -> None:
    """編成を選択していないエディタからはレスポンスを作らない."""
    with pytest.raises(InvalidEditorStateError):
        FormationResponse.from_editor(FormationEditor(store, bob))

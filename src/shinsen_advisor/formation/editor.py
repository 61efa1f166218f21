"""編成エディタ.

(相談者, 編成者, ラベル) を選んで編成を読み込み、枠を編集して保存する
状態機械。状態は ``EditorState`` で明示的に持つ。

    UNINITIALIZED -> LOADING -> READY
    READY -> SAVING -> READY

読み込みに失敗した場合は UNINITIALIZED に、保存に失敗した場合は READY に戻る。
"""

import logging
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError

from shinsen_advisor.common.exceptions import (
    EmptyFormationError,
    FormationLimitError,
    FormationLoadError,
    FormationPermissionError,
    InvalidEditorStateError,
    InvalidLabelError,
    OwnerRequiredError,
)
from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.model.formation import Formation
from shinsen_advisor.formation.labels import (
    DEFAULT_LABEL,
    label_number,
    next_label,
    sort_labels,
)
from shinsen_advisor.formation.protocol import FormationStore
from shinsen_advisor.formation.slots import SlotPosition, Slots, SlotState, empty_slots
from shinsen_advisor.formation.synchronizer import FormationSynchronizer
from shinsen_advisor.identity.store import UserContext

logger = logging.getLogger(__name__)

DEFAULT_MAX_FORMATIONS = 5


class EditorState(str, Enum):
    """編成エディタの状態."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    SAVING = "saving"


class FormationEditor:
    """1つの編成を編集する状態機械.

    Attributes
    ----------
        store: 編成の永続化先
        viewer: 操作中のユーザー(編成者として保存できるのは自分のタブのみ)
        synchronizer: 保存処理
        max_formations: 相談者ごとに1人の編成者が持てる編成数
        state: 現在の状態
        owner_key: 選択中の相談者
        advisor_key: 選択中の編成者タブ
        label: 選択中の編成ラベル
        formation_id: 保存済みならヘッダーのID
        slots: 枠の状態
        request_comment: 依頼者コメント
        answer_comment: 回答者コメント
        label_map: 編成者 -> ラベル一覧(相談者単位)

    """

    def __init__(
        self,
        store: FormationStore,
        viewer: UserContext,
        synchronizer: FormationSynchronizer | None = None,
        max_formations: int = DEFAULT_MAX_FORMATIONS,
    ) -> None:
        self.store = store
        self.viewer = viewer
        self.synchronizer = synchronizer or FormationSynchronizer(store)
        self.max_formations = max_formations

        self.state = EditorState.UNINITIALIZED
        self.owner_key: str | None = None
        self.advisor_key: str | None = None
        self.label: str | None = None
        self.formation_id: int | None = None
        self.slots: Slots = empty_slots()
        self.request_comment = ""
        self.answer_comment = ""
        self.label_map: dict[str, list[str]] = {}

    # --- 参照 ---

    @property
    def is_my_advisor_view(self) -> bool:
        """選択中の編成者タブが自分自身か."""
        return self.advisor_key is not None and self.advisor_key == self.viewer.user_key

    @property
    def advisors(self) -> list[str]:
        """編成者タブの一覧(編成のある編成者 + 自分)."""
        return sorted(set(self.label_map) | {self.viewer.user_key})

    def labels_for(self, advisor_key: str) -> list[str]:
        """編成者のラベル一覧. まだ1つもなければ既定ラベルだけを返す."""
        return list(self.label_map.get(advisor_key) or [DEFAULT_LABEL])

    # --- 読み込み ---

    async def load_labels(self, owner_key: str) -> dict[str, list[str]]:
        """相談者宛の編成ラベルを編成者ごとに読み込む.

        Raises
        ------
            FormationLoadError: 取得失敗時

        """
        try:
            headers = await self.store.list_headers_by_owner(owner_key)
        except SQLAlchemyError as e:
            raise FormationLoadError(f"formations一覧取得エラー: {e}") from e

        grouped: dict[str, list[str]] = {}
        for header in headers:
            if not header.advisor_key:
                continue
            grouped.setdefault(header.advisor_key, []).append(header.label)

        self.label_map = {adv: sort_labels(labels) for adv, labels in grouped.items()}
        return self.label_map

    async def select_formation(
        self,
        owner_key: str,
        advisor_key: str,
        label: str,
    ) -> None:
        """編成を選択して読み込む.

        ヘッダーが存在しない場合は、そのラベルの未保存の空の編成として扱う。

        Raises
        ------
            InvalidEditorStateError: 読み込み中・保存中に呼ばれた場合
            FormationLoadError: 取得失敗時

        """
        if self.state in (EditorState.LOADING, EditorState.SAVING):
            raise InvalidEditorStateError(
                f"{self.state.value} の間は編成を切り替えられません"
            )

        self.state = EditorState.LOADING
        self.owner_key = owner_key
        self.advisor_key = advisor_key
        self.label = label
        self.formation_id = None
        self.slots = empty_slots()
        self.request_comment = ""
        self.answer_comment = ""

        try:
            header = await self.store.get_header(owner_key, advisor_key, label)
        except SQLAlchemyError as e:
            self.state = EditorState.UNINITIALIZED
            raise FormationLoadError(f"formations取得エラー: {e}") from e

        if header is not None and header.id is not None:
            self.formation_id = header.id
            self.request_comment = header.request_comment or ""
            self.answer_comment = header.answer_comment or ""

            try:
                rows = await self.store.get_slots(header.id)
            except SQLAlchemyError as e:
                self.state = EditorState.UNINITIALIZED
                raise FormationLoadError(f"formation_slots取得エラー: {e}") from e

            slots = empty_slots()
            for row in rows:
                try:
                    position = SlotPosition(row.position)
                except ValueError:
                    logger.warning(
                        f"{LogPrefix.FORMATION_LOAD} unknown position "
                        f"{row.position!r} in formation {header.id}"
                    )
                    continue
                slots[position] = SlotState(
                    officer_id=row.officer_id,
                    inherit1_id=row.inherit_skill1_id,
                    inherit2_id=row.inherit_skill2_id,
                )
            self.slots = slots

        self.state = EditorState.READY
        logger.info(
            f"{LogPrefix.FORMATION_LOAD} owner={owner_key} advisor={advisor_key} "
            f"label={label} id={self.formation_id}"
        )

    # --- 編集 ---

    def set_officer(self, position: SlotPosition, officer_id: int | None) -> None:
        """枠の武将を設定する."""
        self._require_ready()
        current = self.slots[position]
        self.slots[position] = SlotState(
            officer_id=officer_id,
            inherit1_id=current.inherit1_id,
            inherit2_id=current.inherit2_id,
        )

    def set_inherited_skill(
        self,
        position: SlotPosition,
        slot_index: int,
        skill_id: int | None,
    ) -> None:
        """枠の伝授戦法(1 or 2)を設定する."""
        self._require_ready()
        if slot_index not in (1, 2):
            raise ValueError(f"slot_index must be 1 or 2: {slot_index}")

        current = self.slots[position]
        if slot_index == 1:
            updated = SlotState(current.officer_id, skill_id, current.inherit2_id)
        else:
            updated = SlotState(current.officer_id, current.inherit1_id, skill_id)
        self.slots[position] = updated

    def set_comments(
        self,
        request_comment: str | None = None,
        answer_comment: str | None = None,
    ) -> None:
        """依頼者・回答者コメントを設定する. None の項目は変更しない."""
        self._require_ready()
        if request_comment is not None:
            self.request_comment = request_comment
        if answer_comment is not None:
            self.answer_comment = answer_comment

    async def add_formation(self) -> str:
        """自分の編成者タブに新しい編成を追加して選択する.

        既存ラベルで使われていない最小の番号を採番する。

        Returns
        -------
            追加したラベル

        Raises
        ------
            OwnerRequiredError: 相談者が未選択
            FormationPermissionError: 自分以外の編成者タブを選択中
            FormationLimitError: 編成数が上限に達している

        """
        if not self.owner_key:
            raise OwnerRequiredError()
        if not self.is_my_advisor_view:
            raise FormationPermissionError("編成を追加できるのは自分の編成者タブのみです。")

        my_labels = self.label_map.get(self.viewer.user_key, [])
        if len(my_labels) >= self.max_formations:
            raise FormationLimitError(self.max_formations)

        label = next_label(my_labels)
        self.label_map[self.viewer.user_key] = [*my_labels, label]

        await self.select_formation(self.owner_key, self.viewer.user_key, label)
        return label

    async def save(self) -> int:
        """現在の編成を保存する.

        Returns
        -------
            保存された編成のID

        Raises
        ------
            OwnerRequiredError: 相談者が未選択
            FormationPermissionError: 自分以外の編成者タブを選択中
            EmptyFormationError: 武将が1人も設定されていない
            FormationLimitError: 新しいラベルで、既に上限数の編成がある
            InvalidLabelError: ラベルが 編成1〜編成<上限> の範囲外
            InvalidEditorStateError: READY 以外で呼ばれた場合
            FormationSyncError: 保存の各ステップの失敗時

        """
        if not self.owner_key:
            raise OwnerRequiredError()
        if not self.is_my_advisor_view:
            raise FormationPermissionError("保存できるのは自分の編成者タブのみです。")
        self._require_ready()
        if all(slot.officer_id is None for slot in self.slots.values()):
            raise EmptyFormationError()

        label = self.label
        if label is None:
            raise InvalidEditorStateError("編成ラベルが選択されていません")

        my_labels = self.label_map.get(self.viewer.user_key, [])
        if label not in my_labels and len(my_labels) >= self.max_formations:
            raise FormationLimitError(self.max_formations)

        number = label_number(label)
        if number is None or not 1 <= number <= self.max_formations:
            raise InvalidLabelError(label, self.max_formations)

        header = Formation(
            id=self.formation_id,
            owner_key=self.owner_key,
            advisor_key=self.viewer.user_key,
            user_key=self.owner_key,
            label=label,
            request_comment=self.request_comment,
            answer_comment=self.answer_comment,
        )

        self.state = EditorState.SAVING
        try:
            formation_id = await self.synchronizer.persist(header, dict(self.slots))
        finally:
            self.state = EditorState.READY

        self.formation_id = formation_id
        my_labels = self.label_map.get(self.viewer.user_key, [])
        self.label_map[self.viewer.user_key] = sort_labels([*my_labels, label])
        return formation_id

    # --- プライベートメソッド ---

    def _require_ready(self) -> None:
        if self.state is not EditorState.READY:
            raise InvalidEditorStateError(
                f"編成を読み込んでから操作してください (state={self.state.value})"
            )

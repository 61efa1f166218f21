"""編成のリクエスト・レスポンススキーマ."""

from pydantic import BaseModel, Field

from shinsen_advisor.common.exceptions import InvalidEditorStateError
from shinsen_advisor.formation.editor import EditorState, FormationEditor
from shinsen_advisor.formation.slots import POSITIONS, SlotPosition, SlotState
from shinsen_advisor.roster.schema import OfficerResponse, SkillViewResponse


class SlotSchema(BaseModel):
    """1枠分の武将・伝授戦法."""

    officer_id: int | None = None
    inherit1_id: int | None = None
    inherit2_id: int | None = None

    def to_state(self) -> SlotState:
        """エディタ用の枠状態に変換."""
        return SlotState(
            officer_id=self.officer_id,
            inherit1_id=self.inherit1_id,
            inherit2_id=self.inherit2_id,
        )


class OwnerListResponse(BaseModel):
    """相談者一覧と初期選択."""

    owners: list[str]
    selected: str | None


class FormationOverviewResponse(BaseModel):
    """相談者単位の編成画面の初期データ."""

    owner_key: str
    officers: list[OfficerResponse]
    skills: list[SkillViewResponse]
    advisors: list[str]
    labels: dict[str, list[str]]


class FormationResponse(BaseModel):
    """1つの編成の内容."""

    owner_key: str
    advisor_key: str
    label: str
    formation_id: int | None
    state: EditorState
    is_my_advisor_view: bool
    slots: dict[SlotPosition, SlotSchema]
    request_comment: str
    answer_comment: str
    labels: list[str]
    advisors: list[str]

    @classmethod
    def from_editor(cls, editor: FormationEditor) -> "FormationResponse":
        """エディタの状態からレスポンスを作る."""
        if editor.owner_key is None or editor.advisor_key is None or editor.label is None:
            raise InvalidEditorStateError("編成が選択されていません")

        labels = editor.labels_for(editor.advisor_key)
        if editor.label not in labels:
            labels.append(editor.label)

        return cls(
            owner_key=editor.owner_key,
            advisor_key=editor.advisor_key,
            label=editor.label,
            formation_id=editor.formation_id,
            state=editor.state,
            is_my_advisor_view=editor.is_my_advisor_view,
            slots={
                position: SlotSchema(
                    officer_id=editor.slots[position].officer_id,
                    inherit1_id=editor.slots[position].inherit1_id,
                    inherit2_id=editor.slots[position].inherit2_id,
                )
                for position in POSITIONS
            },
            request_comment=editor.request_comment,
            answer_comment=editor.answer_comment,
            labels=labels,
            advisors=editor.advisors,
        )


class SaveFormationRequest(BaseModel):
    """編成の保存リクエスト."""

    slots: dict[SlotPosition, SlotSchema] = Field(default_factory=dict)
    request_comment: str | None = None
    answer_comment: str | None = None


class ShareTextResponse(BaseModel):
    """共有用テキスト."""

    text: str

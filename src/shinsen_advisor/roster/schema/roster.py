"""所持武将・所持戦法のリクエスト・レスポンススキーマ."""

from pydantic import BaseModel, ConfigDict, Field


class OfficerResponse(BaseModel):
    """武将レスポンススキーマ."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    rarity: int
    cost_raw: int | None
    faction: str | None
    house: str | None
    inherent_skill_name: str | None
    inherent_skill_type: str | None = None


class SkillResponse(BaseModel):
    """戦法レスポンススキーマ."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str | None
    trigger_rate: int | None
    description: str | None
    inherit1_name: str | None
    inherit2_name: str | None


class SkillViewResponse(SkillResponse):
    """所持・伝授可否付きの戦法レスポンススキーマ."""

    is_owned: bool
    is_inheritable: bool


class OfficerCountResponse(BaseModel):
    """武将と所持枚数."""

    officer: OfficerResponse
    count: int


class OfficerFilterOptionsResponse(BaseModel):
    """所持武将登録画面の絞り込み候補."""

    rarities: list[int]
    costs: list[int]
    factions: list[str]


class OfficerRosterResponse(BaseModel):
    """所持武将登録画面のレスポンス."""

    user_key: str
    officers: list[OfficerCountResponse]
    filters: OfficerFilterOptionsResponse


class OfficerCountsRequest(BaseModel):
    """所持枚数の保存リクエスト(武将ID -> 枚数)."""

    counts: dict[int, int] = Field(default_factory=dict)


class SkillOwnershipResponse(BaseModel):
    """戦法と所持有無."""

    skill: SkillResponse
    owned: bool


class SkillRosterResponse(BaseModel):
    """所持戦法登録画面のレスポンス."""

    user_key: str
    skills: list[SkillOwnershipResponse]
    categories: list[str]


class SkillOwnershipRequest(BaseModel):
    """所持戦法の保存リクエスト(戦法ID -> 所持有無)."""

    owned: dict[int, bool] = Field(default_factory=dict)


class SaveResultResponse(BaseModel):
    """保存結果."""

    message: str
    saved: int

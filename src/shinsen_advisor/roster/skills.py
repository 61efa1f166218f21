"""所持状況に応じた戦法の判定."""

from collections.abc import Collection, Iterable

from pydantic import BaseModel, ConfigDict

from shinsen_advisor.database.model.officer import Officer
from shinsen_advisor.database.model.skill import Skill


class SkillView(BaseModel):
    """所持・伝授可否を付与した戦法.

    Attributes
    ----------
        is_owned: 戦法そのものを所持しているか
        is_inheritable: 伝授元の武将を所持しているか

    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    category: str | None = None
    trigger_rate: int | None = None
    description: str | None = None
    inherit1_name: str | None = None
    inherit2_name: str | None = None
    is_owned: bool = False
    is_inheritable: bool = False

    @property
    def has_inheritor(self) -> bool:
        """伝授元の武将が設定されているかどうか."""
        return bool(self.inherit1_name or self.inherit2_name)

    @property
    def is_selectable(self) -> bool:
        """編成の伝授戦法として選べるかどうか."""
        return self.has_inheritor and (self.is_owned or self.is_inheritable)


def is_inheritable(skill: Skill | SkillView, owned_officers: Iterable[Officer]) -> bool:
    """伝授元の武将名のどちらかが所持武将の名前と完全一致するか.

    Args:
    ----
        skill: 判定する戦法
        owned_officers: 所持武将

    Returns:
    -------
        伝授元の武将を所持していれば True

    """
    names = {officer.name for officer in owned_officers}
    return _matches_inheritor(skill, names)


def annotate_skills(
    skills: Iterable[Skill],
    owned_skill_ids: Collection[int],
    owned_officers: Iterable[Officer],
) -> list[SkillView]:
    """戦法に所持・伝授可否のフラグを付ける(固有戦法は除外)."""
    officer_names = {officer.name for officer in owned_officers}
    views = []
    for skill in skills:
        if skill.is_exclusive or skill.id is None:
            continue
        views.append(
            SkillView(
                id=skill.id,
                name=skill.name,
                category=skill.category,
                trigger_rate=skill.trigger_rate,
                description=skill.description,
                inherit1_name=skill.inherit1_name,
                inherit2_name=skill.inherit2_name,
                is_owned=skill.id in owned_skill_ids,
                is_inheritable=_matches_inheritor(skill, officer_names),
            )
        )
    return views


def selectable_skills(skills: Iterable[SkillView]) -> list[SkillView]:
    """伝授元があり、かつ所持 or 伝授可能な戦法だけを返す."""
    return [skill for skill in skills if skill.is_selectable]


def _matches_inheritor(skill: Skill | SkillView, officer_names: Collection[str]) -> bool:
    return any(
        name is not None and name in officer_names
        for name in (skill.inherit1_name, skill.inherit2_name)
    )

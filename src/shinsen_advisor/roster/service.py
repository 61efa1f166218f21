"""所持武将・所持戦法のサービスモジュール."""

import logging
from collections.abc import Awaitable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Annotated, TypeVar

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError

from shinsen_advisor.common.exceptions import RosterLoadError, RosterSaveError
from shinsen_advisor.common.log_prefix import LogPrefix
from shinsen_advisor.database.model.officer import Officer
from shinsen_advisor.database.model.skill import Skill
from shinsen_advisor.database.repository.officer_repository import (
    OfficerRepository,
    get_officer_repository,
)
from shinsen_advisor.database.repository.ownership_repository import (
    OwnershipRepository,
    get_ownership_repository,
)
from shinsen_advisor.database.repository.skill_repository import (
    SkillRepository,
    get_skill_repository,
)
from shinsen_advisor.identity.store import UserContext
from shinsen_advisor.roster.index import RecordIndex
from shinsen_advisor.roster.skills import SkillView, annotate_skills

logger = logging.getLogger(__name__)

R = TypeVar("R")


@dataclass(frozen=True)
class Roster:
    """あるユーザーの所持武将と戦法一覧.

    Attributes
    ----------
        user_key: 対象ユーザー名
        owned_officers: 所持武将(レア度降順・名前昇順)
        skills: 固有戦法を除いた戦法(所持・伝授可否付き)
        officer_index: 武将ID -> 武将
        skill_index: 戦法ID -> 戦法

    """

    user_key: str
    owned_officers: list[Officer]
    skills: list[SkillView]
    officer_index: RecordIndex[Officer] = field(repr=False)
    skill_index: RecordIndex[SkillView] = field(repr=False)


@dataclass(frozen=True)
class OfficerCount:
    """武将と所持枚数の組."""

    officer: Officer
    count: int


@dataclass(frozen=True)
class OfficerFilterOptions:
    """所持武将登録画面の絞り込み候補."""

    rarities: list[int]
    costs: list[int]
    factions: list[str]


@dataclass(frozen=True)
class SkillOwnership:
    """戦法と所持有無の組."""

    skill: Skill
    owned: bool


class RosterService:
    """所持武将・所持戦法に関するビジネスロジックを提供するサービス.

    Attributes
    ----------
        officer_repo: 武将リポジトリ
        skill_repo: 戦法リポジトリ
        ownership_repo: 所持状況リポジトリ

    """

    def __init__(
        self,
        officer_repo: OfficerRepository,
        skill_repo: SkillRepository,
        ownership_repo: OwnershipRepository,
    ) -> None:
        self.officer_repo = officer_repo
        self.skill_repo = skill_repo
        self.ownership_repo = ownership_repo

    # --- 編成画面用 ---

    async def load(self, user_key: str) -> Roster:
        """ユーザーの所持武将と、所持・伝授可否付きの戦法一覧を読み込む.

        いずれかの取得に失敗した時点で以降の読み込みを中止する。

        Args:
        ----
            user_key: 対象ユーザー名(編成画面では相談者)

        Returns:
        -------
            Roster

        Raises:
        ------
            RosterLoadError: 取得失敗時

        """
        officer_ids = await self._fetch(
            "user_officers取得エラー",
            self.ownership_repo.get_owned_officer_ids(user_key),
        )
        owned_officers = list(
            await self._fetch(
                "officers取得エラー",
                self.officer_repo.get_by_ids(officer_ids),
            )
        )
        skill_counts = await self._fetch(
            "user_skills取得エラー",
            self.ownership_repo.get_skill_counts(user_key),
        )
        all_skills = await self._fetch(
            "skills取得エラー",
            self.skill_repo.get_general(),
        )

        owned_skill_ids = {
            skill_id for skill_id, count in skill_counts.items() if count > 0
        }
        skills = annotate_skills(all_skills, owned_skill_ids, owned_officers)

        logger.info(
            f"{LogPrefix.ROSTER} user={user_key} "
            f"officers={len(owned_officers)} skills={len(skills)}"
        )
        return Roster(
            user_key=user_key,
            owned_officers=owned_officers,
            skills=skills,
            officer_index=RecordIndex(owned_officers),
            skill_index=RecordIndex(skills),
        )

    # --- 所持武将登録画面用 ---

    async def get_officer_counts(
        self,
        user: UserContext,
        search: str | None = None,
        rarity: int | None = None,
        cost: int | None = None,
        faction: str | None = None,
    ) -> tuple[list[OfficerCount], OfficerFilterOptions]:
        """全武将と所持枚数(未登録は0)を返す.

        Returns
        -------
            (絞り込み後の武将と枚数, 絞り込み候補)

        """
        officers = await self._fetch(
            "officers取得エラー", self.officer_repo.get_all()
        )
        counts = await self._fetch(
            "user_officers取得エラー",
            self.ownership_repo.get_officer_counts(user.user_key),
        )

        filtered = filter_officers(
            officers, search=search, rarity=rarity, cost=cost, faction=faction
        )
        items = [
            OfficerCount(officer=o, count=counts.get(o.id, 0) if o.id else 0)
            for o in filtered
        ]
        return items, officer_filter_options(officers)

    async def save_officer_counts(
        self,
        user: UserContext,
        counts: Mapping[int, int],
    ) -> int:
        """武将の所持枚数を保存. 負の値は0にする."""
        normalized = {officer_id: max(0, count) for officer_id, count in counts.items()}
        try:
            saved = await self.ownership_repo.upsert_officer_counts(
                user.user_key, normalized
            )
        except SQLAlchemyError as e:
            raise RosterSaveError(f"user_officers保存エラー: {e}") from e
        logger.info(f"{LogPrefix.ROSTER} saved officers user={user.user_key} rows={saved}")
        return saved

    # --- 所持戦法登録画面用 ---

    async def get_skill_ownership(
        self,
        user: UserContext,
        category: str | None = None,
        search: str | None = None,
    ) -> tuple[list[SkillOwnership], list[str]]:
        """固有戦法を除く戦法と所持有無(count > 0)を返す.

        Returns
        -------
            (絞り込み後の戦法と所持有無, 種別の候補)

        """
        skills = await self._fetch("skills取得エラー", self.skill_repo.get_general())
        counts = await self._fetch(
            "user_skills取得エラー",
            self.ownership_repo.get_skill_counts(user.user_key),
        )

        items = []
        for skill in skills:
            if category and skill.category != category:
                continue
            if search and search not in skill.name:
                continue
            owned = skill.id is not None and counts.get(skill.id, 0) > 0
            items.append(SkillOwnership(skill=skill, owned=owned))
        categories = sorted({s.category for s in skills if s.category})
        return items, categories

    async def save_skill_ownership(
        self,
        user: UserContext,
        owned: Mapping[int, bool],
    ) -> int:
        """戦法の所持有無を 1/0 の所持数として保存."""
        counts = {skill_id: 1 if flag else 0 for skill_id, flag in owned.items()}
        try:
            saved = await self.ownership_repo.upsert_skill_counts(user.user_key, counts)
        except SQLAlchemyError as e:
            raise RosterSaveError(f"user_skills保存エラー: {e}") from e
        logger.info(f"{LogPrefix.ROSTER} saved skills user={user.user_key} rows={saved}")
        return saved

    # --- プライベートメソッド ---

    async def _fetch(self, error_label: str, query: Awaitable[R]) -> R:
        """取得処理を実行し、失敗時は利用者向けメッセージ付きの例外にする."""
        try:
            return await query
        except SQLAlchemyError as e:
            logger.error(f"{LogPrefix.ROSTER} {error_label}: {e}")
            raise RosterLoadError(f"{error_label}: {e}") from e


def filter_officers(
    officers: Sequence[Officer],
    search: str | None = None,
    rarity: int | None = None,
    cost: int | None = None,
    faction: str | None = None,
) -> list[Officer]:
    """武将を名前の部分一致・レア度・コスト・勢力で絞り込む."""
    result = []
    for officer in officers:
        if search and search not in officer.name:
            continue
        if rarity is not None and officer.rarity != rarity:
            continue
        if cost is not None and officer.cost_raw != cost:
            continue
        if faction and officer.faction != faction:
            continue
        result.append(officer)
    return result


def officer_filter_options(officers: Sequence[Officer]) -> OfficerFilterOptions:
    """絞り込み候補(レア度は降順、コストは昇順、勢力は名前順)を作る."""
    return OfficerFilterOptions(
        rarities=sorted({o.rarity for o in officers if o.rarity is not None}, reverse=True),
        costs=sorted({o.cost_raw for o in officers if o.cost_raw is not None}),
        factions=sorted({o.faction for o in officers if o.faction}),
    )


async def get_roster_service(
    officer_repo: Annotated[OfficerRepository, Depends(get_officer_repository)],
    skill_repo: Annotated[SkillRepository, Depends(get_skill_repository)],
    ownership_repo: Annotated[
        OwnershipRepository,
        Depends(get_ownership_repository),
    ],
) -> RosterService:
    """FastAPI DI用のRosterServiceファクトリ.

    Returns
    -------
        RosterService

    """
    return RosterService(
        officer_repo=officer_repo,
        skill_repo=skill_repo,
        ownership_repo=ownership_repo,
    )

"""所持武将・所持戦法登録APIのルーター定義."""

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from shinsen_advisor.identity.dependencies import get_user_context
from shinsen_advisor.identity.store import UserContext
from shinsen_advisor.roster.schema import (
    OfficerCountResponse,
    OfficerCountsRequest,
    OfficerFilterOptionsResponse,
    OfficerResponse,
    OfficerRosterResponse,
    SaveResultResponse,
    SkillOwnershipRequest,
    SkillOwnershipResponse,
    SkillResponse,
    SkillRosterResponse,
)
from shinsen_advisor.roster.service import RosterService, get_roster_service

router = APIRouter(prefix="/my", tags=["roster"])


@router.get("/officers", response_model=OfficerRosterResponse)
async def get_my_officers(
    user: Annotated[UserContext, Depends(get_user_context)],
    service: Annotated[RosterService, Depends(get_roster_service)],
    search: Annotated[str | None, Query()] = None,
    rarity: Annotated[int | None, Query()] = None,
    cost: Annotated[int | None, Query()] = None,
    faction: Annotated[str | None, Query()] = None,
) -> OfficerRosterResponse:
    """全武将と自分の所持枚数を返す."""
    items, options = await service.get_officer_counts(
        user, search=search, rarity=rarity, cost=cost, faction=faction
    )
    return OfficerRosterResponse(
        user_key=user.user_key,
        officers=[
            OfficerCountResponse(
                officer=OfficerResponse.model_validate(item.officer),
                count=item.count,
            )
            for item in items
        ],
        filters=OfficerFilterOptionsResponse(**asdict(options)),
    )


@router.put("/officers", response_model=SaveResultResponse)
async def put_my_officers(
    body: OfficerCountsRequest,
    user: Annotated[UserContext, Depends(get_user_context)],
    service: Annotated[RosterService, Depends(get_roster_service)],
) -> SaveResultResponse:
    """所持枚数を保存する."""
    saved = await service.save_officer_counts(user, body.counts)
    return SaveResultResponse(message="保存しました！", saved=saved)


@router.get("/skills", response_model=SkillRosterResponse)
async def get_my_skills(
    user: Annotated[UserContext, Depends(get_user_context)],
    service: Annotated[RosterService, Depends(get_roster_service)],
    category: Annotated[str | None, Query()] = None,
    search: Annotated[str | None, Query()] = None,
) -> SkillRosterResponse:
    """固有戦法を除く戦法と自分の所持有無を返す."""
    items, categories = await service.get_skill_ownership(
        user, category=category, search=search
    )
    return SkillRosterResponse(
        user_key=user.user_key,
        skills=[
            SkillOwnershipResponse(
                skill=SkillResponse.model_validate(item.skill),
                owned=item.owned,
            )
            for item in items
        ],
        categories=categories,
    )


@router.put("/skills", response_model=SaveResultResponse)
async def put_my_skills(
    body: SkillOwnershipRequest,
    user: Annotated[UserContext, Depends(get_user_context)],
    service: Annotated[RosterService, Depends(get_roster_service)],
) -> SaveResultResponse:
    """所持戦法を保存する."""
    saved = await service.save_skill_ownership(user, body.owned)
    return SaveResultResponse(message="保存しました！", saved=saved)

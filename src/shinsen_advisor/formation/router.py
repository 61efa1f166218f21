"""編成作成APIのルーター定義."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from shinsen_advisor.formation.schema import (
    FormationOverviewResponse,
    FormationResponse,
    OwnerListResponse,
    SaveFormationRequest,
    ShareTextResponse,
)
from shinsen_advisor.formation.service import (
    FormationService,
    get_formation_service,
    resolve_owner,
)
from shinsen_advisor.identity.dependencies import get_user_context
from shinsen_advisor.identity.store import UserContext
from shinsen_advisor.roster.schema import OfficerResponse, SkillViewResponse
from shinsen_advisor.roster.skills import selectable_skills

router = APIRouter(prefix="/formations", tags=["formations"])


@router.get("", response_model=OwnerListResponse)
async def get_owners(
    user: Annotated[UserContext, Depends(get_user_context)],
    service: Annotated[FormationService, Depends(get_formation_service)],
    owner: Annotated[str | None, Query(description="me または相談者名")] = None,
) -> OwnerListResponse:
    """相談者一覧と、最初に選択する相談者を返す."""
    owners = await service.list_owners()
    return OwnerListResponse(
        owners=owners,
        selected=resolve_owner(owners, owner, user),
    )


@router.get("/{owner_key}", response_model=FormationOverviewResponse)
async def get_overview(
    owner_key: str,
    user: Annotated[UserContext, Depends(get_user_context)],
    service: Annotated[FormationService, Depends(get_formation_service)],
) -> FormationOverviewResponse:
    """相談者の所持武将・選択可能な戦法・編成者タブ・ラベル一覧を返す."""
    roster = await service.load_roster(owner_key)
    editor = await service.open_editor(user, owner_key)
    return FormationOverviewResponse(
        owner_key=owner_key,
        officers=[OfficerResponse.model_validate(o) for o in roster.owned_officers],
        skills=[
            SkillViewResponse.model_validate(s.model_dump())
            for s in selectable_skills(roster.skills)
        ],
        advisors=editor.advisors,
        labels=editor.label_map,
    )


@router.post("/{owner_key}/labels", response_model=FormationResponse)
async def add_formation(
    owner_key: str,
    user: Annotated[UserContext, Depends(get_user_context)],
    service: Annotated[FormationService, Depends(get_formation_service)],
) -> FormationResponse:
    """自分の編成者タブに編成を追加する(保存するまでは未登録)."""
    editor = await service.add_formation(user, owner_key)
    return FormationResponse.from_editor(editor)


@router.put("/{owner_key}/{label}", response_model=FormationResponse)
async def save_formation(
    owner_key: str,
    label: str,
    body: SaveFormationRequest,
    user: Annotated[UserContext, Depends(get_user_context)],
    service: Annotated[FormationService, Depends(get_formation_service)],
) -> FormationResponse:
    """自分が編成者として編成を保存する."""
    editor = await service.save(
        user,
        owner_key,
        label,
        slots={position: slot.to_state() for position, slot in body.slots.items()},
        request_comment=body.request_comment,
        answer_comment=body.answer_comment,
    )
    return FormationResponse.from_editor(editor)


@router.get("/{owner_key}/{advisor_key}/{label}", response_model=FormationResponse)
async def get_formation(
    owner_key: str,
    advisor_key: str,
    label: str,
    user: Annotated[UserContext, Depends(get_user_context)],
    service: Annotated[FormationService, Depends(get_formation_service)],
) -> FormationResponse:
    """編成を1つ返す. 未保存のラベルなら空の編成."""
    editor = await service.open_editor(user, owner_key, advisor_key, label)
    return FormationResponse.from_editor(editor)


@router.get(
    "/{owner_key}/{advisor_key}/{label}/text",
    response_model=ShareTextResponse,
)
async def get_share_text(
    owner_key: str,
    advisor_key: str,
    label: str,
    user: Annotated[UserContext, Depends(get_user_context)],
    service: Annotated[FormationService, Depends(get_formation_service)],
) -> ShareTextResponse:
    """編成の共有用テキストを返す. コピーはクライアント側で行う."""
    text = await service.share_text(user, owner_key, advisor_key, label)
    return ShareTextResponse(text=text)

"""ユーザー選択(ログイン)APIのルーター定義."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from shinsen_advisor.common.exceptions import ValidationError
from shinsen_advisor.identity.dependencies import get_identity_store
from shinsen_advisor.identity.schema import (
    LoginRequest,
    MeResponse,
    MessageResponse,
)
from shinsen_advisor.identity.service import (
    UserDirectoryService,
    get_user_directory_service,
)
from shinsen_advisor.identity.store import IdentityStore

router = APIRouter(tags=["identity"])


@router.get("/users", response_model=list[str])
async def get_users(
    service: Annotated[UserDirectoryService, Depends(get_user_directory_service)],
    search: Annotated[str | None, Query()] = None,
) -> list[str]:
    """登録済みユーザー名の一覧を返す."""
    return await service.list_users(search=search)


@router.post("/login", response_model=MeResponse)
async def login(
    body: LoginRequest,
    store: Annotated[IdentityStore, Depends(get_identity_store)],
) -> MeResponse:
    """ユーザー名を設定する."""
    if not store.set(body.name):
        raise ValidationError("ユーザー名を入力してください")
    return MeResponse(user_key=store.get())


@router.post("/logout", response_model=MessageResponse)
async def logout(
    store: Annotated[IdentityStore, Depends(get_identity_store)],
) -> MessageResponse:
    """ユーザー名の設定を解除する."""
    store.clear()
    return MessageResponse(message="ログアウトしました")


@router.get("/me", response_model=MeResponse)
async def me(
    store: Annotated[IdentityStore, Depends(get_identity_store)],
) -> MeResponse:
    """ログイン中のユーザー名を返す(未設定なら null)."""
    return MeResponse(user_key=store.get())

"""ユーザー名まわりのFastAPI依存性."""

from typing import Annotated

from fastapi import Depends, Request, Response

from shinsen_advisor.common.exceptions import IdentityRequiredError
from shinsen_advisor.identity.storage import CookieStorage
from shinsen_advisor.identity.store import IdentityStore, UserContext
from shinsen_advisor.settings.settings import Settings, get_settings


def get_identity_store(
    request: Request,
    response: Response,
    settings: Annotated[Settings, Depends(get_settings)],
) -> IdentityStore:
    """Cookieを保存先とするIdentityStoreを返す."""
    storage = CookieStorage(
        request,
        response,
        max_age=settings.user_key_cookie_max_age,
    )
    return IdentityStore(storage, key=settings.user_key_cookie)


def get_user_context(
    store: Annotated[IdentityStore, Depends(get_identity_store)],
) -> UserContext:
    """ログイン中のユーザーを返す. 未設定なら 401."""
    context = store.context()
    if context is None:
        raise IdentityRequiredError()
    return context

"""ユーザー名関連のリクエスト・レスポンススキーマ."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """ログイン(ユーザー名設定)リクエスト."""

    name: str


class MeResponse(BaseModel):
    """ログイン中のユーザー."""

    user_key: str | None


class MessageResponse(BaseModel):
    """利用者向けメッセージのみを返すレスポンス."""

    message: str

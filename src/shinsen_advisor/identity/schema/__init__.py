"""ユーザー名関連スキーマ."""

from .identity import LoginRequest, MeResponse, MessageResponse

__all__ = ["LoginRequest", "MeResponse", "MessageResponse"]

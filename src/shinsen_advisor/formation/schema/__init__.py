"""編成スキーマ."""

from .formation import (
    FormationOverviewResponse,
    FormationResponse,
    OwnerListResponse,
    SaveFormationRequest,
    ShareTextResponse,
    SlotSchema,
)

__all__ = [
    "FormationOverviewResponse",
    "FormationResponse",
    "OwnerListResponse",
    "SaveFormationRequest",
    "ShareTextResponse",
    "SlotSchema",
]

"""所持武将・所持戦法スキーマ."""

from .roster import (
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
    SkillViewResponse,
)

__all__ = [
    "OfficerCountResponse",
    "OfficerCountsRequest",
    "OfficerFilterOptionsResponse",
    "OfficerResponse",
    "OfficerRosterResponse",
    "SaveResultResponse",
    "SkillOwnershipRequest",
    "SkillOwnershipResponse",
    "SkillResponse",
    "SkillRosterResponse",
    "SkillViewResponse",
]

"""リポジトリモジュール."""

from .formation_repository import (
    FormationRepository,
    get_formation_repository,
)
from .officer_repository import (
    OfficerRepository,
    get_officer_repository,
)
from .ownership_repository import (
    OwnershipRepository,
    get_ownership_repository,
)
from .skill_repository import (
    SkillRepository,
    get_skill_repository,
)

__all__ = [
    "FormationRepository",
    "OfficerRepository",
    "OwnershipRepository",
    "SkillRepository",
    "get_formation_repository",
    "get_officer_repository",
    "get_ownership_repository",
    "get_skill_repository",
]

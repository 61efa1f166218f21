"""編成機能のプロトコル."""

from .clipboard import Clipboard
from .formation_store import FormationStore

__all__ = ["Clipboard", "FormationStore"]

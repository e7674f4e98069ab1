"""Keyboard-driven quick launcher: hotkey overlay, ranked search, actions."""

__version__ = "0.1.0"

from quicklaunch.models import (
    Action,
    Candidate,
    CopyText,
    MatchTier,
    OpenPath,
    RunCallback,
    SearchResult,
    Session,
)

__all__ = [
    "Action",
    "Candidate",
    "CopyText",
    "MatchTier",
    "OpenPath",
    "RunCallback",
    "SearchResult",
    "Session",
    "__version__",
]

"""Data models and enums for the quick-launch overlay."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Union


class MatchTier(IntEnum):
    """Priority class of a match. Lower value ranks higher."""

    ALIAS = 0
    EXACT = 1
    PREFIX = 2
    FUZZY = 3


@dataclass(frozen=True, slots=True)
class OpenPath:
    """Open a file or URI with the OS default handler."""

    path: str


@dataclass(frozen=True, slots=True)
class CopyText:
    """Write text to the clipboard."""

    text: str


@dataclass(frozen=True, slots=True)
class RunCallback:
    """Ask the scripting worker to run a registered callback."""

    name: str


Action = Union[OpenPath, CopyText, RunCallback]


@dataclass(frozen=True, slots=True)
class Candidate:
    """A searchable entry.

    Exactly one of ``path`` (launchable shortcut) or ``callback``
    (script-registered shortcut) is set.
    """

    name: str
    path: str | None = None
    callback: str | None = None

    @classmethod
    def from_path(cls, path: str | Path) -> Candidate:
        """Build a launchable candidate named after the file stem."""
        p = Path(path)
        return cls(name=p.stem, path=str(p))

    @classmethod
    def from_callback(cls, name: str) -> Candidate:
        """Build a script-backed candidate; the callback name doubles as label."""
        return cls(name=name, callback=name)

    def to_action(self) -> Action:
        """Action that launching this candidate performs."""
        if self.callback is not None:
            return RunCallback(self.callback)
        return OpenPath(self.path or "")


@dataclass(frozen=True, slots=True)
class SearchResult:
    """One row of a ranked result list."""

    text: str
    action: Action | None = None


@dataclass
class Session:
    """Live state of one open overlay.

    ``focus`` is None while the query input holds focus, otherwise the
    index of the focused result row.
    """

    query: str = ""
    focus: int | None = None
    result_count: int = 0

    def cycle_focus(self) -> int | None:
        """Advance focus around the ring input -> result 0 .. N-1 -> input."""
        if self.focus is None:
            self.focus = 0
        elif self.focus + 1 >= self.result_count:
            self.focus = None
        else:
            self.focus += 1
        return self.focus

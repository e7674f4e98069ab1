"""Action dispatcher: performs the side effect of a selected result.

Returns whether the overlay should close. OS and clipboard access go
through injectable callables so tests never touch the real desktop.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

import pyperclip
import typer

from quicklaunch.models import Action, CopyText, OpenPath, RunCallback, SearchResult

logger = logging.getLogger(__name__)


class DispatchError(Exception):
    """Executing a result's action failed. The overlay stays open."""

    def __init__(self, message: str, action: Action) -> None:
        super().__init__(message)
        self.action = action


class SpawnFailed(DispatchError):
    """The OS could not open the path."""


class ClipboardFailed(DispatchError):
    """Writing to the clipboard failed."""


class ScriptUnavailable(DispatchError):
    """A callback was requested but no scripting worker is attached."""


class ScriptChannel(Protocol):
    """Inbound side of the scripting worker."""

    def request_run(self, name: str) -> None: ...


def os_open(path: str) -> None:
    """Open *path* with the OS default handler."""
    code = typer.launch(path)
    if code != 0:
        raise OSError(f"launcher exited with status {code}")


class ActionDispatcher:
    """Executes OpenPath / CopyText / RunCallback actions.

    Args:
        opener: Opens a path or URI; raises on failure.
        clipboard: Writes text to the clipboard; raises on failure.
        scripts: Scripting worker channel, or None when no scripts loaded.
    """

    def __init__(
        self,
        opener: Callable[[str], None] = os_open,
        clipboard: Callable[[str], None] = pyperclip.copy,
        scripts: ScriptChannel | None = None,
    ) -> None:
        self._opener = opener
        self._clipboard = clipboard
        self._scripts = scripts

    def execute(self, result: SearchResult) -> bool:
        """Run *result*'s action and report whether the overlay should close.

        RunCallback always returns False here; the scripting worker's close
        decision arrives later over its outbound channel.

        Raises:
            SpawnFailed, ClipboardFailed, ScriptUnavailable
        """
        action = result.action
        logger.info("select text=%r action=%r", result.text, action)
        if action is None:
            return False

        if isinstance(action, OpenPath):
            try:
                self._opener(action.path)
            except Exception as exc:
                raise SpawnFailed(f"couldn't open {action.path!r}: {exc}", action) from exc
            return True

        if isinstance(action, CopyText):
            try:
                self._clipboard(action.text)
            except Exception as exc:
                raise ClipboardFailed(f"couldn't copy to clipboard: {exc}", action) from exc
            return False

        if isinstance(action, RunCallback):
            if self._scripts is None:
                raise ScriptUnavailable(
                    f"no scripting worker for callback {action.name!r}", action
                )
            self._scripts.request_run(action.name)
            return False

        raise TypeError(f"unknown action {action!r}")

"""User scripts that register callback-backed shortcuts."""

from quicklaunch.scripting.messages import (
    CallbackFailed,
    CloseDecision,
    CloseRequested,
    Done,
    Registered,
    RunRequest,
)
from quicklaunch.scripting.worker import LauncherApi, ScriptWorker

__all__ = [
    "CallbackFailed",
    "CloseDecision",
    "CloseRequested",
    "Done",
    "LauncherApi",
    "Registered",
    "RunRequest",
    "ScriptWorker",
]

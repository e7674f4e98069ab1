"""Overlay lifecycle: phase chart, session machine, hotkey poller."""

from quicklaunch.session.fsm import LauncherPhaseSM
from quicklaunch.session.hotkey import HotkeyEvent, HotkeyPoller, KeyboardHotkeySource, combo_held
from quicklaunch.session.machine import EASTER_EGG_HINT, SessionStateMachine

__all__ = [
    "EASTER_EGG_HINT",
    "HotkeyEvent",
    "HotkeyPoller",
    "KeyboardHotkeySource",
    "LauncherPhaseSM",
    "SessionStateMachine",
    "combo_held",
]

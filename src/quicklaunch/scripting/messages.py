"""Messages exchanged with the scripting worker."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class RunRequest:
    """UI -> worker: run the callback registered as ``name``."""

    name: str


@dataclass(frozen=True)
class Registered:
    """Worker -> UI: a script registered a shortcut (handshake only)."""

    name: str


@dataclass(frozen=True)
class Done:
    """Worker -> UI: every script has loaded; the handshake is over."""


@dataclass(frozen=True)
class CloseDecision:
    """Worker -> UI: a callback finished; close the overlay if ``should_close``."""

    name: str
    should_close: bool


@dataclass(frozen=True)
class CallbackFailed:
    """Worker -> UI: a callback raised or was unknown."""

    name: str
    error: str


@dataclass(frozen=True)
class CloseRequested:
    """Worker -> UI: a script asked for the overlay to close."""


OutboundMessage = Union[Registered, Done, CloseDecision, CallbackFailed, CloseRequested]

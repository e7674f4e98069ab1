"""Shared pytest fixtures for the quick launcher tests.

Provides a small candidate universe, a ranking engine over it, a
dispatcher wired to mock OS/clipboard callables, and a fake scripting
worker that records run requests and replays scripted outbound messages.
"""

from __future__ import annotations

import queue
from unittest.mock import MagicMock

import pytest

from quicklaunch.dispatch import ActionDispatcher
from quicklaunch.models import Candidate
from quicklaunch.search import RankingEngine
from quicklaunch.session import HotkeyEvent, SessionStateMachine


class FakeScriptWorker:
    """Stand-in for ScriptWorker: records requests, replays queued messages."""

    def __init__(self) -> None:
        self.requested: list[str] = []
        self.pending: list[object] = []

    def request_run(self, name: str) -> None:
        self.requested.append(name)

    def poll(self) -> list[object]:
        messages, self.pending = self.pending, []
        return messages


@pytest.fixture
def candidates() -> list[Candidate]:
    """Five launchable shortcuts in registration order."""
    return [
        Candidate.from_path("/apps/Notepad.lnk"),
        Candidate.from_path("/apps/Notepad++.lnk"),
        Candidate.from_path("/apps/Firefox.desktop"),
        Candidate.from_path("/apps/File Explorer.lnk"),
        Candidate.from_path("/apps/Terminal.desktop"),
    ]


@pytest.fixture
def engine(candidates: list[Candidate]) -> RankingEngine:
    return RankingEngine(candidates, aliases={"web": "Firefox"})


@pytest.fixture
def opener() -> MagicMock:
    return MagicMock(name="opener")


@pytest.fixture
def clipboard() -> MagicMock:
    return MagicMock(name="clipboard")


@pytest.fixture
def fake_worker() -> FakeScriptWorker:
    return FakeScriptWorker()


@pytest.fixture
def dispatcher(opener, clipboard, fake_worker) -> ActionDispatcher:
    return ActionDispatcher(opener=opener, clipboard=clipboard, scripts=fake_worker)


@pytest.fixture
def machine(engine, dispatcher, fake_worker) -> SessionStateMachine:
    """Session machine with its first tick already taken (phase unopened)."""
    sm = SessionStateMachine(engine, dispatcher, hotkey_events=queue.Queue(), scripts=fake_worker)
    sm.tick()
    return sm


@pytest.fixture
def opened(machine: SessionStateMachine) -> SessionStateMachine:
    """Session machine with the overlay open and an empty query."""
    machine.hotkey_events.put(HotkeyEvent.OPEN)
    machine.tick()
    return machine

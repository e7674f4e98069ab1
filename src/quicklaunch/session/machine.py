"""Session state machine driving the overlay.

One ``tick()`` per rendered frame, always in the same order:

1. drain pending hotkey events,
2. resolve the current phase (first -> unopened, unopened -> opened on a
   hotkey, opened -> unopened on a script close signal, otherwise
   refresh the session from the ranking engine),
3. expose the resulting phase to the caller.

Keyboard/mouse input (Tab, Enter, Escape, click) arrives between ticks
through ``cycle_focus()``, ``activate()``, ``select()`` and ``cancel()``.
Everything here runs on the UI thread.
"""

from __future__ import annotations

import logging
import queue

from quicklaunch.dispatch import ActionDispatcher, DispatchError
from quicklaunch.models import SearchResult, Session
from quicklaunch.scripting.messages import (
    CallbackFailed,
    CloseDecision,
    CloseRequested,
    OutboundMessage,
)
from quicklaunch.search.engine import RankingEngine
from quicklaunch.session.fsm import LauncherPhaseSM
from quicklaunch.session.hotkey import HotkeyEvent

logger = logging.getLogger(__name__)

EASTER_EGG_QUERY = "anything"
EASTER_EGG_HINT = "you can't search for anything, silly"


class SessionStateMachine:
    """Owns the overlay phase, the live Session, and result dispatch.

    Args:
        engine: Ranking engine consulted on every tick.
        dispatcher: Executes the action of a selected result.
        hotkey_events: Queue fed by the hotkey poller (created if omitted).
        scripts: Scripting worker exposing ``poll()``, or None.
    """

    def __init__(
        self,
        engine: RankingEngine,
        dispatcher: ActionDispatcher,
        hotkey_events: queue.Queue[HotkeyEvent] | None = None,
        scripts: object | None = None,
    ) -> None:
        self.engine = engine
        self.dispatcher = dispatcher
        self.hotkey_events: queue.Queue[HotkeyEvent] = (
            hotkey_events if hotkey_events is not None else queue.Queue()
        )
        self.scripts = scripts
        self._fsm = LauncherPhaseSM()
        self.session: Session | None = None
        self.results: list[SearchResult] = []
        self.last_error: DispatchError | None = None

    # ------------------------------------------------------------------
    # Phase
    # ------------------------------------------------------------------

    @property
    def phase(self) -> str:
        """``"first"``, ``"unopened"`` or ``"opened"``."""
        return self._fsm.current_state.value

    @property
    def is_open(self) -> bool:
        return self.phase == "opened"

    def tick(self, query: str | None = None) -> str:
        """Advance one frame; *query* is the input widget's current text.

        Returns:
            The phase after this tick.
        """
        open_requested = self._drain_hotkey_events()
        script_messages = self._poll_scripts()
        self._log_failures(script_messages)

        if self.phase == "first":
            self._fsm.resolve()
        elif self.phase == "unopened":
            if open_requested:
                self._open()
            else:
                self._fsm.idle()
        else:
            if self._script_requests_close(script_messages):
                self._close("script")
            else:
                self._refresh(query)
                self._fsm.refresh()

        return self.phase

    def _drain_hotkey_events(self) -> bool:
        requested = False
        while True:
            try:
                event = self.hotkey_events.get_nowait()
            except queue.Empty:
                return requested
            if event == HotkeyEvent.OPEN:
                requested = True

    def _poll_scripts(self) -> list[OutboundMessage]:
        if self.scripts is None:
            return []
        return self.scripts.poll()

    def _log_failures(self, messages: list[OutboundMessage]) -> None:
        for message in messages:
            if isinstance(message, CallbackFailed):
                logger.error("callback %r failed: %s", message.name, message.error)

    @staticmethod
    def _script_requests_close(messages: list[OutboundMessage]) -> bool:
        # Only consulted while open; close signals polled while hidden are dropped.
        return any(
            isinstance(message, CloseRequested)
            or (isinstance(message, CloseDecision) and message.should_close)
            for message in messages
        )

    def _open(self) -> None:
        self._fsm.summon()
        self.session = Session()
        self.results = []
        logger.info("overlay opened")

    def _close(self, reason: str) -> None:
        self._fsm.dismiss()
        self.session = None
        self.results = []
        logger.info("overlay closed reason=%s", reason)

    def _refresh(self, query: str | None) -> None:
        session = self.session
        if query is not None:
            session.query = query
        self.results = self.engine.search(session.query)
        session.result_count = len(self.results)
        if session.focus is not None and session.focus >= session.result_count:
            session.focus = None

    # ------------------------------------------------------------------
    # Input between ticks
    # ------------------------------------------------------------------

    def cancel(self) -> None:
        """Escape: hide the overlay. No-op when already hidden."""
        if self.is_open:
            self._close("cancel")

    def cycle_focus(self) -> int | None:
        """Tab: move focus around the input/results ring."""
        if self.session is None:
            return None
        return self.session.cycle_focus()

    def set_focus(self, index: int | None) -> int | None:
        """Move focus to result *index*, or to the input for None.

        Out-of-range indexes leave focus unchanged.
        """
        if self.session is None:
            return None
        if index is None or 0 <= index < self.session.result_count:
            self.session.focus = index
        return self.session.focus

    def activate(self) -> bool:
        """Enter: select the focused result, or the top one from the input.

        Returns:
            True if the overlay closed.
        """
        if self.session is None:
            return False
        focus = self.session.focus
        return self.select(0 if focus is None else focus)

    def select(self, index: int) -> bool:
        """Dispatch result *index* (Enter on a row, or a click).

        Dispatch failures are logged and kept on ``last_error``; the
        overlay stays open so another result can be picked.

        Returns:
            True if the overlay closed.
        """
        self.last_error = None
        if not self.is_open or not 0 <= index < len(self.results):
            return False

        result = self.results[index]
        try:
            should_close = self.dispatcher.execute(result)
        except DispatchError as exc:
            logger.error("dispatch failed text=%r error=%s", result.text, exc)
            self.last_error = exc
            return False

        if should_close:
            self._close("dispatch")
        return should_close

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def display_rows(self) -> list[str]:
        """Row texts to render, including the ``anything`` hint."""
        if self.session is None:
            return []
        if not self.results and self.session.query.strip() == EASTER_EGG_QUERY:
            return [EASTER_EGG_HINT]
        return [result.text for result in self.results]

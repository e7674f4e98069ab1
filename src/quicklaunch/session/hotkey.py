"""Global hotkey polling worker.

The poller runs on its own daemon thread, samples global key state at a
fixed interval, and enqueues ``HotkeyEvent.OPEN`` once per activation
edge (combo goes from not-held to held). It never touches session
state; the UI thread drains the queue at the start of each tick.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.05


class HotkeyEvent(str, Enum):
    """Messages sent from the poller to the UI thread."""

    OPEN = "open"


class HotkeySource(Protocol):
    """Global keyboard state provider."""

    def poll_pressed_combo(self) -> set[str]:
        """Return the currently-held keys (at least those of the combo)."""
        ...


class KeyboardHotkeySource:
    """Hotkey source backed by the ``keyboard`` package.

    ``keyboard`` needs elevated privileges on Linux; the import is deferred
    so merely loading this module never installs OS hooks.
    """

    def __init__(self, combo: Iterable[str]) -> None:
        import keyboard

        self._keyboard = keyboard
        self._combo = [key.lower() for key in combo]

    def poll_pressed_combo(self) -> set[str]:
        return {key for key in self._combo if self._keyboard.is_pressed(key)}


def combo_held(combo: Iterable[str], pressed: set[str]) -> bool:
    """True when every key of *combo* is in *pressed*."""
    keys = {key.lower() for key in combo}
    return bool(keys) and keys <= {key.lower() for key in pressed}


class HotkeyPoller(threading.Thread):
    """Daemon thread turning held-combo samples into debounced open events.

    Args:
        source: Global key state provider.
        combo: Key names that must all be held together.
        events: Queue consumed by the UI tick loop.
        interval: Seconds between samples.
        wake: Called after an event is queued (e.g. to request a repaint).
    """

    def __init__(
        self,
        source: HotkeySource,
        combo: Iterable[str],
        events: queue.Queue[HotkeyEvent],
        interval: float = DEFAULT_POLL_INTERVAL,
        wake: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(name="hotkey-poller", daemon=True)
        self._source = source
        self._combo = list(combo)
        self._events = events
        self._interval = interval
        self._wake = wake
        self._was_held = False
        self._stop_event = threading.Event()

    def poll_once(self) -> bool:
        """Take one sample; return True if an open event was queued."""
        held = combo_held(self._combo, self._source.poll_pressed_combo())
        fired = held and not self._was_held
        self._was_held = held
        if fired:
            logger.debug("hotkey activated combo=%s", "+".join(self._combo))
            self._events.put(HotkeyEvent.OPEN)
            if self._wake is not None:
                self._wake()
        return fired

    def run(self) -> None:
        logger.info(
            "hotkey poller started combo=%s interval=%.3fs",
            "+".join(self._combo),
            self._interval,
        )
        while not self._stop_event.wait(self._interval):
            try:
                self.poll_once()
            except Exception:
                logger.exception("hotkey source failed; poller stopping")
                return

    def stop(self) -> None:
        """Ask the loop to exit after the current sample."""
        self._stop_event.set()

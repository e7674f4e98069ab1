"""Scripting worker thread.

Owns every user script and its callbacks. Talks to the UI thread only
through two queues:

- inbound:  ``RunRequest(name)`` (and a ``None`` shutdown sentinel)
- outbound: ``Registered(name)``* then ``Done()`` during the startup
  handshake; afterwards ``CloseDecision`` / ``CallbackFailed`` per run
  request and unsolicited ``CloseRequested`` whenever a script calls
  ``launcher.close()``.

A callback that hangs blocks this thread only; its close decision never
arrives and the UI keeps running.
"""

from __future__ import annotations

import logging
import queue
import runpy
import threading
from collections.abc import Callable, Iterable
from pathlib import Path

from quicklaunch.scripting.messages import (
    CallbackFailed,
    CloseDecision,
    CloseRequested,
    Done,
    OutboundMessage,
    Registered,
    RunRequest,
)

logger = logging.getLogger(__name__)


class LauncherApi:
    """The ``launcher`` global handed to every script."""

    def __init__(self, worker: ScriptWorker) -> None:
        self._worker = worker

    def register(self, name: str, callback: Callable[[], object]) -> None:
        """Expose *callback* as a searchable shortcut called *name*.

        The callback's return value is the close decision: truthy closes
        the overlay.
        """
        self._worker._register(name, callback)

    def close(self) -> None:
        """Ask the UI to hide the overlay."""
        self._worker._outbound.put(CloseRequested())


class ScriptWorker(threading.Thread):
    """Loads user scripts and runs their callbacks off the UI thread.

    Usage::

        worker = ScriptWorker(sorted(scripts_dir.glob("*.py")))
        worker.start()
        for name in worker.drain_registrations():
            engine.register_callback_shortcut(name)
        ...
        worker.request_run("toggle wifi")
        for message in worker.poll():
            ...
    """

    def __init__(self, scripts: Iterable[Path]) -> None:
        super().__init__(name="script-worker", daemon=True)
        self._scripts = list(scripts)
        self._inbound: queue.Queue[RunRequest | None] = queue.Queue()
        self._outbound: queue.Queue[OutboundMessage] = queue.Queue()
        self._callbacks: dict[str, Callable[[], object]] = {}
        self._deferred: list[OutboundMessage] = []
        self._loading = False
        self.api = LauncherApi(self)

    # ------------------------------------------------------------------
    # UI-thread side
    # ------------------------------------------------------------------

    def drain_registrations(self) -> list[str]:
        """Block until the handshake completes; return registered names in order."""
        names: list[str] = []
        while True:
            message = self._outbound.get()
            if isinstance(message, Done):
                return names
            if isinstance(message, Registered):
                names.append(message.name)
            else:
                # Close signals can race the handshake; poll() returns them.
                self._deferred.append(message)

    def request_run(self, name: str) -> None:
        """Queue a callback run; the result arrives via poll()."""
        self._inbound.put(RunRequest(name))

    def poll(self) -> list[OutboundMessage]:
        """Return every pending outbound message without blocking."""
        messages, self._deferred = self._deferred, []
        while True:
            try:
                messages.append(self._outbound.get_nowait())
            except queue.Empty:
                return messages

    def stop(self, timeout: float | None = 1.0) -> None:
        """Send the shutdown sentinel and wait for the thread to exit."""
        self._inbound.put(None)
        if self.is_alive():
            self.join(timeout)

    # ------------------------------------------------------------------
    # Worker-thread side
    # ------------------------------------------------------------------

    def run(self) -> None:
        self._load_scripts()
        while True:
            request = self._inbound.get()
            if request is None:
                logger.debug("script worker shutting down")
                return
            self._outbound.put(self._run_callback(request.name))

    def _load_scripts(self) -> None:
        self._loading = True
        try:
            for path in self._scripts:
                try:
                    runpy.run_path(
                        str(path),
                        init_globals={"launcher": self.api},
                        run_name=f"quicklaunch_script_{path.stem}",
                    )
                    logger.info("loaded script %s", path)
                except (Exception, SystemExit):
                    logger.exception("script %s failed to load; skipping", path)
        finally:
            self._loading = False
            self._outbound.put(Done())

    def _register(self, name: str, callback: Callable[[], object]) -> None:
        if not self._loading:
            logger.warning("ignoring late registration of %r outside script load", name)
            return
        if name in self._callbacks:
            logger.warning("callback %r registered twice; keeping the first", name)
            return
        self._callbacks[name] = callback
        self._outbound.put(Registered(name))

    def _run_callback(self, name: str) -> CloseDecision | CallbackFailed:
        callback = self._callbacks.get(name)
        if callback is None:
            logger.error("no callback registered as %r", name)
            return CallbackFailed(name, "unknown callback")
        try:
            should_close = bool(callback())
        except (Exception, SystemExit) as exc:
            logger.exception("callback %r raised", name)
            return CallbackFailed(name, repr(exc))
        logger.debug("callback %r finished should_close=%s", name, should_close)
        return CloseDecision(name, should_close)

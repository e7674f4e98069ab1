"""Scripting worker tests.

Scripts are real files under tmp_path executed on the worker thread, so
these exercise the handshake, run requests, close signals and failure
reporting end to end.
"""

from __future__ import annotations

import textwrap
import time
from pathlib import Path

import pytest

from quicklaunch.scripting import (
    CallbackFailed,
    CloseDecision,
    CloseRequested,
    ScriptWorker,
)


def _script(directory: Path, name: str, body: str) -> Path:
    path = directory / name
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


def _wait_for(worker: ScriptWorker, timeout: float = 2.0) -> list:
    """Poll until at least one message arrives."""
    end = time.monotonic() + timeout
    while time.monotonic() < end:
        messages = worker.poll()
        if messages:
            return messages
        time.sleep(0.005)
    return []


@pytest.fixture
def worker_factory():
    started: list[ScriptWorker] = []

    def _start(*scripts: Path) -> ScriptWorker:
        worker = ScriptWorker(scripts)
        worker.start()
        started.append(worker)
        return worker

    yield _start
    for worker in started:
        worker.stop()


# ---------------------------------------------------------------------------
# Handshake
# ---------------------------------------------------------------------------


class TestHandshake:
    def test_no_scripts(self, worker_factory):
        assert worker_factory().drain_registrations() == []

    def test_registrations_in_script_then_call_order(self, tmp_path, worker_factory):
        a = _script(tmp_path, "a.py", """
            launcher.register("first", lambda: True)
            launcher.register("second", lambda: False)
        """)
        b = _script(tmp_path, "b.py", """
            launcher.register("third", lambda: True)
        """)
        worker = worker_factory(a, b)
        assert worker.drain_registrations() == ["first", "second", "third"]

    def test_broken_script_is_skipped(self, tmp_path, worker_factory, caplog):
        bad = _script(tmp_path, "bad.py", "raise RuntimeError('broken')\n")
        good = _script(tmp_path, "good.py", 'launcher.register("ok", lambda: True)\n')
        worker = worker_factory(bad, good)
        assert worker.drain_registrations() == ["ok"]
        assert "failed to load" in caplog.text

    def test_sys_exit_in_script_is_contained(self, tmp_path, worker_factory):
        quits = _script(tmp_path, "quits.py", "import sys\nsys.exit(1)\n")
        good = _script(tmp_path, "good.py", 'launcher.register("ok", lambda: True)\n')
        worker = worker_factory(quits, good)
        assert worker.drain_registrations() == ["ok"]

    def test_duplicate_name_keeps_first(self, tmp_path, worker_factory):
        s = _script(tmp_path, "dup.py", """
            launcher.register("wifi", lambda: "first")
            launcher.register("wifi", lambda: None)
        """)
        worker = worker_factory(s)
        assert worker.drain_registrations() == ["wifi"]
        worker.request_run("wifi")
        assert _wait_for(worker) == [CloseDecision("wifi", True)]

    def test_close_during_load_is_deferred_to_poll(self, tmp_path, worker_factory):
        s = _script(tmp_path, "eager.py", """
            launcher.register("x", lambda: True)
            launcher.close()
        """)
        worker = worker_factory(s)
        assert worker.drain_registrations() == ["x"]
        assert worker.poll() == [CloseRequested()]
        assert worker.poll() == []


# ---------------------------------------------------------------------------
# Run requests
# ---------------------------------------------------------------------------


class TestRun:
    @pytest.fixture
    def worker(self, tmp_path, worker_factory):
        s = _script(tmp_path, "cmds.py", """
            calls = []

            def stay():
                calls.append("stay")
                return False

            def boom():
                raise ValueError("kaput")

            def quit_():
                import sys
                sys.exit(0)

            def late_register():
                launcher.register("late", lambda: True)
                return False

            def close_then_stay():
                launcher.close()
                return False

            launcher.register("stay", stay)
            launcher.register("leave", lambda: 1)
            launcher.register("boom", boom)
            launcher.register("quit", quit_)
            launcher.register("late register", late_register)
            launcher.register("close then stay", close_then_stay)
        """)
        worker = worker_factory(s)
        worker.drain_registrations()
        return worker

    def test_poll_is_empty_before_any_request(self, worker):
        assert worker.poll() == []

    def test_truthy_return_closes(self, worker):
        worker.request_run("leave")
        assert _wait_for(worker) == [CloseDecision("leave", True)]

    def test_falsy_return_keeps_open(self, worker):
        worker.request_run("stay")
        assert _wait_for(worker) == [CloseDecision("stay", False)]

    def test_exception_reported_not_raised(self, worker):
        worker.request_run("boom")
        (message,) = _wait_for(worker)
        assert isinstance(message, CallbackFailed)
        assert "kaput" in message.error
        assert worker.is_alive()

    def test_sys_exit_in_callback_is_reported(self, worker):
        worker.request_run("quit")
        (message,) = _wait_for(worker)
        assert isinstance(message, CallbackFailed)
        assert message.name == "quit"
        worker.request_run("leave")
        assert _wait_for(worker) == [CloseDecision("leave", True)]
        assert worker.is_alive()

    def test_unknown_callback(self, worker):
        worker.request_run("missing")
        assert _wait_for(worker) == [CallbackFailed("missing", "unknown callback")]

    def test_registration_after_load_is_ignored(self, worker):
        worker.request_run("late register")
        assert _wait_for(worker) == [CloseDecision("late register", False)]
        worker.request_run("late")
        assert _wait_for(worker) == [CallbackFailed("late", "unknown callback")]

    def test_close_signal_from_callback(self, worker):
        worker.request_run("close then stay")
        messages = _wait_for(worker)
        if len(messages) < 2:
            messages += _wait_for(worker)
        assert messages == [CloseRequested(), CloseDecision("close then stay", False)]

    def test_requests_answered_in_order(self, worker):
        worker.request_run("stay")
        worker.request_run("leave")
        messages = _wait_for(worker)
        if len(messages) < 2:
            messages += _wait_for(worker)
        assert messages == [CloseDecision("stay", False), CloseDecision("leave", True)]


def test_stop_ends_thread():
    worker = ScriptWorker([])
    worker.start()
    worker.drain_registrations()
    worker.stop(timeout=2)
    assert not worker.is_alive()


def test_worker_is_daemon():
    worker = ScriptWorker([])
    assert worker.daemon is True
    assert worker.name == "script-worker"

"""Terminal overlay for the quick launcher.

``run_tui`` performs the startup sequence: load config, scan shortcuts,
run the script registration handshake, start the hotkey poller, then
hand control to the Textual app until it exits.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_LOG_DIR = "logs"


def run_tui(
    config_dir: Path | None = None,
    global_hotkey: bool = True,
    log_dir: str = DEFAULT_LOG_DIR,
) -> None:
    """Build every collaborator and run the overlay.

    All imports are deferred so ``quicklaunch --help`` stays fast.

    Args:
        config_dir: Override for the config directory.
        global_hotkey: Start the OS-wide hotkey poller.
        log_dir: Directory for JSON-lines log files.
    """
    import logging
    import queue

    from quicklaunch.config import list_scripts, load_config
    from quicklaunch.dispatch import ActionDispatcher
    from quicklaunch.scanner import ShortcutScanner
    from quicklaunch.scripting import ScriptWorker
    from quicklaunch.search import RankingEngine
    from quicklaunch.session import HotkeyPoller, KeyboardHotkeySource, SessionStateMachine
    from quicklaunch.tui.app import LauncherApp
    from quicklaunch.tui.telemetry import configure_file_logging

    logger = logging.getLogger(__name__)
    configure_file_logging(log_dir)

    config = load_config(config_dir)
    engine = RankingEngine(ShortcutScanner(config.search).scan(), config.search.aliases)

    worker: ScriptWorker | None = None
    scripts = list_scripts(config_dir)
    if scripts:
        worker = ScriptWorker(scripts)
        worker.start()
        for name in worker.drain_registrations():
            engine.register_callback_shortcut(name)

    if not engine.candidates:
        logger.warning("no shortcuts found; only the calculator is available")

    events: queue.Queue = queue.Queue()
    machine = SessionStateMachine(
        engine,
        ActionDispatcher(scripts=worker),
        hotkey_events=events,
        scripts=worker,
    )
    app = LauncherApp(
        machine,
        hotkey=config.general.hotkey if global_hotkey else None,
        window=config.window,
        style=config.style,
    )

    poller: HotkeyPoller | None = None
    if global_hotkey:
        try:
            source = KeyboardHotkeySource(config.general.hotkey)
        except ImportError as exc:
            logger.error("global hotkey unavailable: %s", exc)
        else:
            poller = HotkeyPoller(
                source,
                config.general.hotkey,
                events,
                interval=config.general.poll_interval,
                wake=app.request_repaint,
            )
            poller.start()

    try:
        app.run()
    finally:
        if poller is not None:
            poller.stop()
        if worker is not None:
            worker.stop()

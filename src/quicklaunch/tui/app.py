"""Quick-launch overlay application.

The App is a thin shell around SessionStateMachine: a 30 Hz interval
timer is the UI tick loop, key bindings and widget messages feed input
events to the machine between ticks, and the machine's phase decides
whether the overlay or the idle hint is shown.
"""

from __future__ import annotations

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Input, Static

from quicklaunch.config import StyleConfig, WindowConfig
from quicklaunch.session.hotkey import HotkeyEvent
from quicklaunch.session.machine import SessionStateMachine
from quicklaunch.tui.messages import ResultSelected
from quicklaunch.tui.telemetry import Telemetry, set_telemetry
from quicklaunch.tui.widgets import QueryInput, ResultsList

# Terminal cells are roughly 8x16 pixels.
_CELL_WIDTH_PX = 8
_CELL_HEIGHT_PX = 16


class LauncherApp(App):
    """Hotkey-summoned search overlay."""

    TITLE = "quicklaunch"

    CSS = """
    Screen {
        align: center middle;
    }

    #idle-hint {
        width: auto;
        color: $text-muted;
    }

    #overlay {
        width: 80;
        height: 20;
        background: $surface;
        border: round $accent;
    }
    """

    BINDINGS = [
        Binding("tab", "cycle_focus", "Next", priority=True),
        Binding("escape", "cancel", "Hide", priority=True),
        Binding("ctrl+space", "summon", "Open"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    TICK_INTERVAL = 1 / 30

    def __init__(
        self,
        machine: SessionStateMachine,
        hotkey: list[str] | None = None,
        window: WindowConfig | None = None,
        style: StyleConfig | None = None,
        telemetry: Telemetry | None = None,
    ) -> None:
        """Wire the app to an already-constructed session machine.

        Args:
            machine: Session machine; its engine must already hold every
                candidate (the script handshake is finished).
            hotkey: Global hotkey combo, shown in the idle hint.
            window: Overlay size hints in pixels.
            style: Optional colour overrides.
            telemetry: OTel facade. Defaults to no-op.
        """
        super().__init__()
        self.machine = machine
        self.hotkey = hotkey or []
        self.window = window or WindowConfig()
        self.style_config = style or StyleConfig()
        self.telemetry = telemetry if telemetry is not None else Telemetry.noop()
        set_telemetry(self.telemetry)
        self._shown_phase: str | None = None
        self._shown_rows: list[str] | None = None

    def compose(self) -> ComposeResult:
        hint = "Press ctrl+space to search"
        if self.hotkey:
            hint = f"Press {'+'.join(self.hotkey)} or ctrl+space to search"
        yield Static(hint, id="idle-hint", markup=False)
        with Vertical(id="overlay"):
            yield QueryInput()
            yield ResultsList()

    async def on_mount(self) -> None:
        self._apply_geometry()
        self._apply_style()
        await self._tick()
        self.set_interval(self.TICK_INTERVAL, self._tick)

    def _apply_geometry(self) -> None:
        overlay = self.query_one("#overlay")
        overlay.styles.width = max(20, self.window.width // _CELL_WIDTH_PX)
        overlay.styles.height = max(5, self.window.height // _CELL_HEIGHT_PX)

    def _apply_style(self) -> None:
        targets = {
            "bg_color": ("#overlay", "background"),
            "input_bg_color": ("#query-input", "background"),
            "text_color": ("#overlay", "color"),
            "stroke_color": ("#overlay", "border"),
        }
        for option, (selector, prop) in targets.items():
            value = getattr(self.style_config, option)
            if value is None:
                continue
            try:
                widget = self.query_one(selector)
                if prop == "border":
                    widget.styles.border = ("round", value)
                else:
                    setattr(widget.styles, prop, value)
            except ValueError as exc:
                self.telemetry.log.warning(f"ignoring style {option}={value!r}: {exc}")

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    async def _tick(self) -> None:
        """Run one machine tick and re-render what changed."""
        query = self.query_one(QueryInput).value if self.machine.is_open else None
        phase = self.machine.tick(query)
        await self._render_phase(phase)

    async def _render_phase(self, phase: str) -> None:
        if phase != self._shown_phase:
            previous, self._shown_phase = self._shown_phase, phase
            opened = phase == "opened"
            self.query_one("#overlay").display = opened
            self.query_one("#idle-hint").display = not opened
            self._shown_rows = None
            if opened:
                query_input = self.query_one(QueryInput)
                query_input.reset()
                query_input.focus()
                with self.telemetry.span("launcher.open"):
                    self.telemetry.log.info("overlay shown")
            elif previous == "opened":
                await self.query_one(ResultsList).update_rows([])
                with self.telemetry.span("launcher.close"):
                    self.telemetry.log.info(f"overlay hidden phase={phase}")

        if phase == "opened":
            rows = self.machine.display_rows()
            if rows != self._shown_rows:
                self._shown_rows = rows
                selectable = bool(self.machine.results)
                await self.query_one(ResultsList).update_rows(rows, selectable)

    # ------------------------------------------------------------------
    # Input events
    # ------------------------------------------------------------------

    def request_repaint(self) -> None:
        """Thread-safe repaint request (called from the hotkey poller)."""
        if self.is_running:
            self.call_from_thread(self.refresh)

    def action_summon(self) -> None:
        """Local stand-in for the global hotkey; same queue, same tick order."""
        self.machine.hotkey_events.put(HotkeyEvent.OPEN)

    async def action_cancel(self) -> None:
        self.machine.cancel()
        await self._render_phase(self.machine.phase)

    def action_cycle_focus(self) -> None:
        focus = self.machine.cycle_focus()
        if not self.machine.is_open:
            return
        if focus is None or not self.query_one(ResultsList).focus_row(focus):
            self.query_one(QueryInput).focus()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in the query field: accept the top result."""
        event.stop()
        await self._dispatch(None)

    async def on_result_selected(self, event: ResultSelected) -> None:
        """Enter on a focused row, or a click: select that row."""
        await self._dispatch(event.index)

    async def _dispatch(self, row: int | None) -> None:
        """Focus *row* (None for the query field), then activate it."""
        if self.machine.set_focus(row) != row:
            self.telemetry.log.warning(f"stale row selected row={row}")
            return
        index = 0 if row is None else row
        attributes: dict[str, object] = {"dispatch.index": index}
        if index < len(self.machine.results):
            attributes["dispatch.text"] = self.machine.results[index].text
        with self.telemetry.span("launcher.dispatch", attributes) as span:
            closed = self.machine.activate()
            span.set_attribute("dispatch.closed", closed)
            error = self.machine.last_error
            if error is not None:
                span.record_exception(error)
                self.telemetry.log.error(f"dispatch failed error={error}")
                self.notify(str(error), title="Action failed", severity="error")
        await self._render_phase(self.machine.phase)

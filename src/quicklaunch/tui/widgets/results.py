"""Result rows for the overlay.

ResultItem renders one SearchResult row and posts ResultSelected on click
or Enter. ResultsList rebuilds its rows whenever the App hands it a new
row list, and moves keyboard focus to a row on request.
"""

from __future__ import annotations

from textual import events
from textual.containers import VerticalScroll
from textual.widgets import Static

from quicklaunch.tui.messages import ResultSelected
from quicklaunch.tui.telemetry import get_telemetry


class ResultItem(Static):
    """One selectable result row."""

    DEFAULT_CSS = """
    ResultItem {
        padding: 0 1;
        height: 1;
    }
    ResultItem:hover {
        background: $primary-background;
    }
    ResultItem:focus {
        background: $accent;
        text-style: bold;
    }
    """

    can_focus = True

    def __init__(self, text: str, result_index: int) -> None:
        super().__init__(text, markup=False)
        self.row_text = text
        self.result_index = result_index

    def on_click(self, event: events.Click) -> None:
        event.stop()
        get_telemetry().log.info(
            f"result clicked index={self.result_index} text={self.row_text!r}"
        )
        self.post_message(ResultSelected(self.result_index))

    def on_key(self, event: events.Key) -> None:
        if event.key == "enter":
            event.stop()
            get_telemetry().log.info(
                f"result enter index={self.result_index} text={self.row_text!r}"
            )
            self.post_message(ResultSelected(self.result_index))


class ResultsList(VerticalScroll):
    """Scrollable list of result rows, or a single hint line."""

    DEFAULT_CSS = """
    ResultsList {
        height: 1fr;
    }
    ResultsList .hint {
        color: $text-muted;
        text-style: italic;
        padding: 0 1;
    }
    """

    can_focus = False

    def __init__(self) -> None:
        super().__init__(id="results-list")
        self.rows: list[str] = []

    async def update_rows(self, rows: list[str], selectable: bool = True) -> None:
        """Replace all rows. Non-selectable rows render as a hint."""
        self.rows = list(rows)
        await self.remove_children()
        if not selectable:
            await self.mount_all([Static(text, classes="hint", markup=False) for text in rows])
            return
        await self.mount_all([ResultItem(text, i) for i, text in enumerate(rows)])

    def focus_row(self, index: int) -> bool:
        """Give keyboard focus to row *index*; False if it is not mounted."""
        items = [item for item in self.query(ResultItem) if item.result_index == index]
        if not items:
            return False
        items[0].focus()
        items[0].scroll_visible(animate=False)
        return True

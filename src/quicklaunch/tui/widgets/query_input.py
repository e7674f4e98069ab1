"""Query input for the overlay.

A plain Textual Input; the App reads its value on every tick, so there
is no debounce. Enter posts ``Input.Submitted``, which the App treats as
"accept the top result".
"""

from __future__ import annotations

from textual.widgets import Input


class QueryInput(Input):
    """Single-line query field docked above the results."""

    DEFAULT_CSS = """
    QueryInput {
        dock: top;
        height: 3;
        border: tall $accent;
    }
    """

    def __init__(self) -> None:
        super().__init__(placeholder="search anything...", id="query-input")

    def reset(self) -> None:
        """Clear the query for a fresh session."""
        self.value = ""

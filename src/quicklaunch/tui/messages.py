"""Textual messages posted by overlay widgets to the App."""

from __future__ import annotations

from textual.message import Message


class ResultSelected(Message):
    """A result row was clicked or had Enter pressed while focused."""

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__()

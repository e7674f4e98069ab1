"""Widgets for the launcher overlay."""

from .query_input import QueryInput
from .results import ResultItem, ResultsList

__all__ = [
    "QueryInput",
    "ResultItem",
    "ResultsList",
]

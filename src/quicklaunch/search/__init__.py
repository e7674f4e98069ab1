"""Ranking and calculator search over launcher candidates."""

from quicklaunch.search.capabilities import ExpressionError, evaluate, format_number, fuzzy_match
from quicklaunch.search.classifier import classify, normalize
from quicklaunch.search.engine import RankingEngine

__all__ = [
    "ExpressionError",
    "RankingEngine",
    "classify",
    "evaluate",
    "format_number",
    "fuzzy_match",
    "normalize",
]

"""Ranking engine: turns a query into an ordered, de-duplicated result list.

Search mode merges four strategies (alias, exact, prefix, fuzzy) into a
single list ordered by MatchTier, stable on candidate registration order.
A query starting with ``=`` switches to calculator mode.

The engine is UI-thread-affine: it is read on every tick and only
mutated during the startup handshake, so it holds no locks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping

from quicklaunch.models import Candidate, CopyText, MatchTier, SearchResult
from quicklaunch.search.capabilities import (
    ExpressionError,
    evaluate,
    format_number,
    fuzzy_match,
)
from quicklaunch.search.classifier import classify, normalize

logger = logging.getLogger(__name__)

CALCULATOR_PREFIX = "="
CALCULATOR_ERROR = "ERROR"

FuzzyMatcher = Callable[[str, str], "float | None"]
Evaluator = Callable[[str], float]


class RankingEngine:
    """Owns the candidate universe and the alias table.

    Usage::

        engine = RankingEngine(candidates, aliases={"note": "Notepad"})
        engine.register_callback_shortcut("toggle wifi")
        results = engine.search("note")
    """

    def __init__(
        self,
        candidates: Iterable[Candidate] = (),
        aliases: Mapping[str, str] | None = None,
        fuzzy: FuzzyMatcher = fuzzy_match,
        evaluator: Evaluator = evaluate,
    ) -> None:
        self._candidates: list[Candidate] = list(candidates)
        self._aliases: dict[str, str] = {
            normalize(key): target for key, target in (aliases or {}).items()
        }
        self._fuzzy = fuzzy
        self._evaluator = evaluator

    @property
    def candidates(self) -> list[Candidate]:
        """Candidates in registration order (copy)."""
        return list(self._candidates)

    def register_callback_shortcut(self, name: str) -> None:
        """Append a script-registered shortcut to the candidate universe."""
        self._candidates.append(Candidate.from_callback(name))
        logger.debug("registered callback shortcut name=%r", name)

    def search(self, query: str) -> list[SearchResult]:
        """Rank candidates for *query*. Never raises."""
        text = query.strip()
        if not text:
            return []
        if text.startswith(CALCULATOR_PREFIX):
            return [self._calculate(text[len(CALCULATOR_PREFIX):])]
        return self._rank(text)

    def _calculate(self, expr: str) -> SearchResult:
        try:
            value = format_number(self._evaluator(expr))
        except ExpressionError as exc:
            logger.debug("calculator error expr=%r error=%s", expr, exc)
            value = CALCULATOR_ERROR
        # The error marker is copyable like a real result.
        return SearchResult(text=f"= {value}", action=CopyText(value))

    def _rank(self, query: str) -> list[SearchResult]:
        needle = normalize(query)
        alias_target = self._aliases.get(needle)

        ranked: list[tuple[MatchTier, Candidate]] = []
        for candidate in self._candidates:
            hit = self._fuzzy(normalize(candidate.name), needle) is not None
            tier = classify(candidate.name, query, alias_target, hit)
            if tier is not None:
                ranked.append((tier, candidate))

        # list.sort is stable: ties keep registration order
        ranked.sort(key=lambda pair: pair[0])

        seen: set[str] = set()
        results: list[SearchResult] = []
        for _tier, candidate in ranked:
            if candidate.name in seen:
                continue
            seen.add(candidate.name)
            results.append(SearchResult(text=candidate.name, action=candidate.to_action()))
        return results

"""Match tier classification for a single candidate.

Pure and total: every combination of inputs yields a tier or None.
"""

from __future__ import annotations

from quicklaunch.models import MatchTier


def normalize(text: str) -> str:
    """Trim surrounding whitespace and lower-case."""
    return text.strip().lower()


def classify(
    candidate_name: str,
    query: str,
    alias_target: str | None,
    fuzzy_hit: bool,
) -> MatchTier | None:
    """Return the highest tier *candidate_name* qualifies for under *query*.

    Args:
        candidate_name: Display name of the candidate.
        query: Raw query text as typed.
        alias_target: Candidate name the alias table maps this query to,
            if any.
        fuzzy_hit: Verdict of the fuzzy-match capability for this pair.

    Returns:
        The matching MatchTier, or None when the candidate is excluded.
        An empty query only ever matches through an alias.
    """
    name = normalize(candidate_name)
    if alias_target is not None and normalize(alias_target) == name:
        return MatchTier.ALIAS

    needle = normalize(query)
    if not needle:
        return None
    if name == needle:
        return MatchTier.EXACT
    if name.startswith(needle):
        return MatchTier.PREFIX
    if fuzzy_hit:
        return MatchTier.FUZZY
    return None

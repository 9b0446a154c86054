"""
Query normalization and synonym expansion.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

__all__ = ["DEFAULT_SYNONYMS", "expand_terms", "normalize_query"]

DEFAULT_SYNONYMS: dict[str, list[str]] = {
    "sneakers": ["running shoes", "trainers", "sport shoes"],
    "earphones": ["earbuds", "headphones"],
    "mobile": ["phone", "smartphone"],
}


def normalize_query(text: str | None) -> str:
    """Lowercase and trim; this is also the result cache key."""
    return (text or "").strip().lower()


def expand_terms(
    text: str,
    synonyms: Mapping[str, Sequence[str]] | None = None,
) -> tuple[str, ...]:
    """
    Build the expanded term set for a query.

    The normalized query always comes first, followed by the synonyms of
    each whitespace-separated token in order of appearance. Duplicates
    are dropped.

    Args:
        text: Raw query text
        synonyms: Token -> synonym list mapping (defaults to DEFAULT_SYNONYMS)

    Returns:
        Ordered, de-duplicated terms; empty for a blank query
    """
    normalized = normalize_query(text)
    if not normalized:
        return ()

    table = DEFAULT_SYNONYMS if synonyms is None else synonyms
    terms: dict[str, None] = {normalized: None}
    for token in normalized.split():
        for synonym in table.get(token, ()):
            terms.setdefault(synonym.lower(), None)
    return tuple(terms)

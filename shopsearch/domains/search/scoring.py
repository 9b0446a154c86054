"""
Scoring - Fixed-band text scoring for local product matching.

Bands: exact (100) > prefix (80) > substring (60) >= fuzzy subsequence.
The fuzzy branch walks the text once and greedily consumes the term's
characters in order; it is typo tolerant but not an edit distance.
"""

from __future__ import annotations

__all__ = [
    "EXACT_SCORE",
    "PREFIX_SCORE",
    "SUBSTRING_SCORE",
    "FUZZY_CHAR_SCORE",
    "FUZZY_COMPLETION_BONUS",
    "score",
]

EXACT_SCORE = 100
PREFIX_SCORE = 80
SUBSTRING_SCORE = 60
FUZZY_CHAR_SCORE = 2
FUZZY_COMPLETION_BONUS = 10


def score(text: str, term: str) -> int:
    """
    Score one text field against one query term (case-insensitive).

    Args:
        text: Searchable text
        term: Query term

    Returns:
        Non-negative integer score; first matching rule wins
    """
    text_lower = text.lower()
    term_lower = term.lower()

    if text_lower == term_lower:
        return EXACT_SCORE
    if text_lower.startswith(term_lower):
        return PREFIX_SCORE
    if term_lower in text_lower:
        return SUBSTRING_SCORE

    total = 0
    consumed = 0
    for char in text_lower:
        if consumed >= len(term_lower):
            break
        if char == term_lower[consumed]:
            total += FUZZY_CHAR_SCORE
            consumed += 1

    if consumed == len(term_lower):
        total += FUZZY_COMPLETION_BONUS

    return total

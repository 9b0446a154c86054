"""
Local Index Matcher - Fuzzy matching over the in-memory product snapshot.

Features:
- One searchable blob per product (name, description, category, tags)
- Max score across synonym-expanded terms
- Noise filtering and a bounded, stably sorted candidate list
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from .models import CandidateSource, Product, ScoredCandidate
from .scoring import score

logger = logging.getLogger(__name__)

__all__ = ["LocalIndex", "build_search_text", "match_products"]

DEFAULT_CANDIDATE_LIMIT = 40
DEFAULT_MIN_SCORE = 10


def build_search_text(product: Product) -> str:
    """Join name, description, category and tags with single spaces."""
    parts = [
        product.name or "",
        product.description or "",
        product.category or "",
        *product.tags,
    ]
    return " ".join(parts)


def match_products(
    products: Sequence[Product],
    terms: Iterable[str],
    limit: int = DEFAULT_CANDIDATE_LIMIT,
    min_score: int = DEFAULT_MIN_SCORE,
) -> list[ScoredCandidate]:
    """Score ``products`` against ``terms`` without building an index."""
    return LocalIndex(products).match(terms, limit=limit, min_score=min_score)


class LocalIndex:
    """
    Read-only product snapshot with precomputed search text.

    Example:
        >>> index = LocalIndex(products)
        >>> candidates = index.match(("sneakers", "running shoes"))
    """

    def __init__(self, products: Sequence[Product] = ()) -> None:
        self._products = tuple(products)
        self._texts = tuple(build_search_text(p) for p in self._products)

    @property
    def size(self) -> int:
        """Number of products in the snapshot."""
        return len(self._products)

    @property
    def products(self) -> tuple[Product, ...]:
        return self._products

    def match(
        self,
        terms: Iterable[str],
        limit: int = DEFAULT_CANDIDATE_LIMIT,
        min_score: int = DEFAULT_MIN_SCORE,
    ) -> list[ScoredCandidate]:
        """
        Rank products by their best score across all terms.

        Args:
            terms: Expanded query terms
            limit: Maximum candidates returned
            min_score: Products scoring at or below this are dropped

        Returns:
            Candidates sorted by score descending, ties in snapshot order
        """
        term_list = [t for t in terms if t]
        if not term_list or not self._products:
            return []

        candidates: list[ScoredCandidate] = []
        for product, text in zip(self._products, self._texts):
            best = max(score(text, term) for term in term_list)
            if best > min_score:
                candidates.append(
                    ScoredCandidate(
                        product=product,
                        source=CandidateSource.LOCAL,
                        score=best,
                    )
                )

        candidates.sort(key=lambda c: c.score or 0, reverse=True)

        logger.debug(
            "Local match: terms=%s -> %d candidates (of %d products)",
            term_list,
            len(candidates),
            len(self._products),
        )
        return candidates[:limit]

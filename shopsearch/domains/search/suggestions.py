"""
Suggestion Engine - Quick picks derived from the trending pool and results.

Suggestions are advisory; choosing one re-seeds the query text and goes
through the normal search cycle.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import Category, Product, Suggestions
from .synonyms import normalize_query

__all__ = [
    "build_trending_pool",
    "did_you_mean",
    "suggest",
    "suggest_categories",
    "suggest_products",
]


def build_trending_pool(*sources: Iterable[Product], limit: int = 20) -> list[Product]:
    """De-duplicate featured/bestseller lists by id, first occurrence wins."""
    pool: dict[str, Product] = {}
    for source in sources:
        for product in source:
            pool.setdefault(product.id, product)
    return list(pool.values())[:limit]


def suggest_products(
    query: str,
    trending: Sequence[Product],
    results: Sequence[Product] = (),
    limit: int = 6,
) -> list[Product]:
    """
    Products whose name contains the query.

    Ordered by starts-with-query first, then shorter name first.
    """
    needle = normalize_query(query)
    if not needle:
        return []

    seen: set[str] = set()
    matched: list[Product] = []
    for product in [*trending, *results]:
        if product.id in seen:
            continue
        if needle in (product.name or "").lower():
            seen.add(product.id)
            matched.append(product)

    matched.sort(
        key=lambda p: (
            not (p.name or "").lower().startswith(needle),
            len(p.name or ""),
        )
    )
    return matched[:limit]


def suggest_categories(
    query: str,
    categories: Sequence[Category],
    limit: int = 6,
) -> list[Category]:
    """Categories whose name contains the query, in catalog order."""
    needle = normalize_query(query)
    if not needle:
        return []
    return [c for c in categories if needle in (c.name or "").lower()][:limit]


def suggest(
    query: str,
    trending: Sequence[Product],
    results: Sequence[Product],
    categories: Sequence[Category],
    limit: int = 6,
) -> Suggestions:
    return Suggestions(
        products=suggest_products(query, trending, results, limit=limit),
        categories=suggest_categories(query, categories, limit=limit),
    )


def did_you_mean(
    query: str,
    trending: Sequence[Product],
    limit: int = 3,
    pool_size: int = 50,
) -> list[str]:
    """Trending names closest in length to the query, for the empty state."""
    text = (query or "").strip()
    if not text:
        return []
    names = [p.name for p in trending if p.name][:pool_size]
    names.sort(key=lambda name: abs(len(name) - len(text)))
    return names[:limit]

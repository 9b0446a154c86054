"""
Result Merger/Ranker - Sole owner of final result order.

Local candidates always precede remote-only products; duplicates are
dropped by product identity. Non-relevance sort orders re-sort the whole
merged list with stable comparators.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone

from .models import Product, ScoredCandidate, SortOrder

__all__ = ["merge_results", "parse_timestamp", "rank_results", "sort_products"]


def parse_timestamp(value: str | None) -> float:
    """ISO-8601 to POSIX seconds; missing or unparsable values map to the epoch."""
    if not value:
        return 0.0
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def merge_results(
    local: Iterable[ScoredCandidate | Product],
    remote: Iterable[Product],
) -> list[Product]:
    """
    Combine local and remote results into relevance order.

    Args:
        local: Local candidates, already sorted and capped
        remote: Remote products in the order received

    Returns:
        Products unique by id, local first
    """
    merged: list[Product] = []
    seen: set[str] = set()

    for item in local:
        product = item.product if isinstance(item, ScoredCandidate) else item
        if product.id not in seen:
            seen.add(product.id)
            merged.append(product)

    for product in remote:
        if product.id not in seen:
            seen.add(product.id)
            merged.append(product)

    return merged


_SORT_KEYS: dict[SortOrder, tuple[Callable[[Product], float], bool]] = {
    SortOrder.PRICE: (lambda p: p.price, False),
    SortOrder.NEWEST: (lambda p: parse_timestamp(p.created_at), True),
    SortOrder.RATING: (lambda p: p.rating or 0, True),
    SortOrder.POPULARITY: (lambda p: p.reviews or 0, True),
}


def sort_products(products: Sequence[Product], order: SortOrder) -> list[Product]:
    """Apply a sort order; equal keys keep their merge order."""
    if order == SortOrder.RELEVANCE:
        return list(products)
    key, descending = _SORT_KEYS[order]
    return sorted(products, key=key, reverse=descending)


def rank_results(
    local: Iterable[ScoredCandidate | Product],
    remote: Iterable[Product],
    order: SortOrder = SortOrder.RELEVANCE,
) -> list[Product]:
    """Merge then sort."""
    return sort_products(merge_results(local, remote), order)

"""
Result Cache - Session-lived cache of ranked result lists.

Entries are keyed by (normalized query, sort order) and never mutated in
place; a settled query always writes a fresh entry for its own key.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from .models import Product, SortOrder
from .synonyms import normalize_query

logger = logging.getLogger(__name__)

__all__ = ["CacheEntry", "ResultCache"]


class CacheEntry(BaseModel):
    """Final ranked list captured for one query and sort order."""

    key: str
    sort: SortOrder
    products: tuple[Product, ...]
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}


class ResultCache:
    """
    In-memory result cache without expiry.

    Features:
    - Per-sort-order entries
    - Hit tracking for diagnostics
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, SortOrder], CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    def get(self, query: str, sort: SortOrder) -> CacheEntry | None:
        """Look up the entry for a query at a sort order."""
        key = normalize_query(query)
        entry = self._entries.get((key, sort))
        if entry is None:
            self._misses += 1
            return None
        self._hits += 1
        logger.debug("Cache hit: %r sort=%s", key, sort.value)
        return entry

    def set(self, query: str, sort: SortOrder, products: list[Product] | tuple[Product, ...]) -> CacheEntry:
        """Store a fresh entry, replacing any previous one for the key."""
        key = normalize_query(query)
        entry = CacheEntry(key=key, sort=sort, products=tuple(products))
        self._entries[(key, sort)] = entry
        logger.debug("Cached results: %r sort=%s (%d products)", key, sort.value, len(entry.products))
        return entry

    def __contains__(self, item: tuple[str, SortOrder]) -> bool:
        query, sort = item
        return (normalize_query(query), sort) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        """Clear all cache entries."""
        count = len(self._entries)
        self._entries.clear()
        logger.info("Cleared %d cache entries", count)

    def stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        by_sort: dict[str, int] = {}
        for _, sort in self._entries:
            by_sort[sort.value] = by_sort.get(sort.value, 0) + 1
        return {
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "by_sort": by_sort,
        }

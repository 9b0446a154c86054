"""
Recent-Search Store - Bounded, case-insensitively unique, most-recent-first.

The list is read once at construction and written back synchronously on
every mutation. Storage failures are logged and never interrupt search.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any

from shopsearch.config.errors import PersistenceError

from .contracts import KeyValueStorage

logger = logging.getLogger(__name__)

__all__ = ["RecentSearchStore"]

DEFAULT_KEY = "recentSearches"
DEFAULT_MAX_SIZE = 8


def _dedupe(items: Iterable[str], max_size: int) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        folded = item.lower()
        if folded in seen:
            continue
        seen.add(folded)
        result.append(item)
        if len(result) >= max_size:
            break
    return result


class RecentSearchStore:
    """
    Recent searches persisted as a JSON array under a fixed storage key.

    Example:
        >>> store = RecentSearchStore(MemoryStorage())
        >>> store.record("sneakers")
        ['sneakers']
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_KEY,
        max_size: int = DEFAULT_MAX_SIZE,
    ) -> None:
        """
        Initialize the store and load the persisted list.

        Args:
            storage: Durable key-value storage
            key: Storage entry name
            max_size: Maximum number of entries kept
        """
        self._storage = storage
        self._key = key
        self._max_size = max_size
        self._items: list[str] = self._load()

    @property
    def items(self) -> list[str]:
        """Current list, most recent first."""
        return list(self._items)

    @property
    def max_size(self) -> int:
        return self._max_size

    def record(self, query: str) -> list[str]:
        """
        Move ``query`` to the front, dropping case-insensitive duplicates.

        Blank queries are ignored.
        """
        text = (query or "").strip()
        if not text:
            return self.items

        self._items = _dedupe([text, *self._items], self._max_size)
        self._persist()
        return self.items

    def remove(self, query: str) -> list[str]:
        """Remove an entry (case-insensitive)."""
        folded = (query or "").strip().lower()
        remaining = [item for item in self._items if item.lower() != folded]
        if len(remaining) != len(self._items):
            self._items = remaining
            self._persist()
        return self.items

    def clear(self) -> None:
        """Forget all recent searches."""
        self._items = []
        try:
            self._storage.remove_item(self._key)
        except PersistenceError as e:
            logger.warning("Failed to clear recent searches: %s", e.message)

    def _load(self) -> list[str]:
        try:
            raw = self._storage.get_item(self._key)
        except PersistenceError as e:
            logger.warning("Failed to read recent searches: %s", e.message)
            return []
        if not raw:
            return []

        try:
            data: Any = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed recent searches entry %r", self._key)
            return []
        if not isinstance(data, list):
            return []

        return _dedupe(
            (item for item in data if isinstance(item, str) and item.strip()),
            self._max_size,
        )

    def _persist(self) -> None:
        try:
            self._storage.set_item(self._key, json.dumps(self._items))
        except PersistenceError as e:
            # List stays in memory; it just won't survive a reload
            logger.warning("Failed to persist recent searches: %s", e.message)
        else:
            logger.debug("Persisted %d recent searches", len(self._items))

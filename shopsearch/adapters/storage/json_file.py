"""
JSON File Storage - Durable client-side key-value storage.

Features:
- Single JSON object file holding string values
- Synchronous writes (atomic replace)
- In-memory variant for tests and ephemeral sessions
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from shopsearch.config.errors import PersistenceError

logger = logging.getLogger(__name__)

__all__ = ["JsonFileStorage", "MemoryStorage"]


class JsonFileStorage:
    """
    Key-value storage persisted to a JSON file.

    Example:
        >>> storage = JsonFileStorage("data/storage.json")
        >>> storage.set_item("recentSearches", '["sneakers"]')
        >>> storage.get_item("recentSearches")
        '["sneakers"]'
    """

    def __init__(self, path: str | Path) -> None:
        """
        Initialize storage.

        Args:
            path: JSON file location (created on first write)
        """
        self.path = Path(path)

    def get_item(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)

    def _read(self) -> dict[str, Any]:
        """Read the whole file; a missing file is empty storage."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(
                f"Cannot read storage file {self.path}",
                {"error": str(e)},
                write=False,
            ) from e
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(
                f"Cannot write storage file {self.path}",
                {"error": str(e)},
            ) from e
        logger.debug("Storage written: %s (%d keys)", self.path, len(data))


class MemoryStorage:
    """Non-durable storage with the same interface."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

"""
History Contracts - Client-side key-value storage interface.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStorage(Protocol):
    """
    Durable string key-value storage (localStorage-like).

    Implementations raise PersistenceError on read/write failure.
    """

    def get_item(self, key: str) -> str | None:
        """Return the stored value or None."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store a value synchronously."""
        ...

    def remove_item(self, key: str) -> None:
        """Delete a value if present."""
        ...

"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from shopsearch.config.errors import ErrorCode, ShopSearchError

    raise ShopSearchError(ErrorCode.SEARCH_INVALID_QUERY, "Unknown sort order")
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Search errors
    SEARCH_INVALID_QUERY = "SEARCH_INVALID_QUERY"
    SEARCH_REMOTE_UNAVAILABLE = "SEARCH_REMOTE_UNAVAILABLE"

    # Storage errors
    STORAGE_READ_FAILED = "STORAGE_READ_FAILED"
    STORAGE_WRITE_FAILED = "STORAGE_WRITE_FAILED"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ShopSearchError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class SearchError(ShopSearchError):
    """Invalid search input (unknown sort order, malformed request)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.SEARCH_INVALID_QUERY, message, details)


class RemoteUnavailableError(ShopSearchError):
    """Storefront backend could not be reached or answered with an error status."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.SEARCH_REMOTE_UNAVAILABLE, message, details)


class PersistenceError(ShopSearchError):
    """Client-side storage read/write failure."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        *,
        write: bool = True,
    ) -> None:
        code = ErrorCode.STORAGE_WRITE_FAILED if write else ErrorCode.STORAGE_READ_FAILED
        super().__init__(code, message, details)

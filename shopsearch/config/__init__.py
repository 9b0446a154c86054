"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    ErrorCode,
    PersistenceError,
    RemoteUnavailableError,
    SearchError,
    ShopSearchError,
)
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Errors
    "ErrorCode",
    "ShopSearchError",
    "SearchError",
    "RemoteUnavailableError",
    "PersistenceError",
]

"""
History Domain - Recent searches persisted across sessions.
"""

from .contracts import KeyValueStorage
from .recent_searches import RecentSearchStore

__all__ = [
    "KeyValueStorage",
    "RecentSearchStore",
]

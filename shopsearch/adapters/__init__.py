"""
Adapters - External service integrations.

All backend and storage access is wrapped here to isolate domains from
transport details.
"""

from .storage import JsonFileStorage, MemoryStorage
from .storefront import StorefrontClient

__all__ = [
    "StorefrontClient",
    "JsonFileStorage",
    "MemoryStorage",
]

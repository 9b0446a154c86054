"""
Storage Adapter - Client-side key-value persistence.
"""

from .json_file import JsonFileStorage, MemoryStorage

__all__ = ["JsonFileStorage", "MemoryStorage"]

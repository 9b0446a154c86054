"""
Search Contracts - Interfaces for search domain collaborators.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from .models import Category, Product, SearchOutcome


@runtime_checkable
class CatalogSource(Protocol):
    """Contract for the product/category data source."""

    async def fetch_all_products(self) -> list[Product]:
        """Bulk snapshot used to seed the local index."""
        ...

    async def fetch_featured_products(self) -> list[Product]:
        """Featured products (trending pool source)."""
        ...

    async def fetch_bestseller_products(self) -> list[Product]:
        """Bestsellers (trending pool source)."""
        ...

    async def fetch_categories(self) -> list[Category]:
        """Categories for category suggestions."""
        ...


@runtime_checkable
class RemoteSearch(Protocol):
    """Contract for the authoritative backend search."""

    async def search(self, text: str) -> list[Product]:
        """
        Search the backend for raw query text.

        Args:
            text: Raw query text

        Returns:
            Products in backend order; raises on transport/HTTP failure
        """
        ...


OutcomeListener = Callable[[SearchOutcome], None]

"""
Membership Contracts - Read-only cart/wishlist membership source.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MembershipProvider(Protocol):
    """Contract for the authenticated cart/wishlist services."""

    async def cart_ids(self) -> set[str]:
        """Product ids currently in the cart."""
        ...

    async def wishlist_ids(self) -> set[str]:
        """Product ids currently in the wishlist."""
        ...

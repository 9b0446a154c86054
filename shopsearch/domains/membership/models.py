"""
Membership Models.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class MembershipSnapshot(BaseModel):
    """Cart and wishlist product ids at one point in time."""

    cart_ids: frozenset[str] = Field(default_factory=frozenset)
    wishlist_ids: frozenset[str] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    def in_cart(self, product_id: str) -> bool:
        return product_id in self.cart_ids

    def in_wishlist(self, product_id: str) -> bool:
        return product_id in self.wishlist_ids

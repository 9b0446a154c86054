"""
Membership Tracker - Current cart/wishlist sets with change subscriptions.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from .contracts import MembershipProvider
from .models import MembershipSnapshot

logger = logging.getLogger(__name__)

__all__ = ["MembershipTracker"]

MembershipListener = Callable[[MembershipSnapshot], None]


class MembershipTracker:
    """
    Holds the latest membership snapshot and notifies subscribers.

    Example:
        >>> tracker = MembershipTracker(storefront_client)
        >>> tracker.subscribe(lambda snapshot: print(snapshot.cart_ids))
        >>> await tracker.notify_changed()  # after an add-to-cart elsewhere
    """

    def __init__(self, provider: MembershipProvider | None = None) -> None:
        self._provider = provider
        self._snapshot = MembershipSnapshot()
        self._listeners: list[MembershipListener] = []

    @property
    def snapshot(self) -> MembershipSnapshot:
        return self._snapshot

    def subscribe(self, listener: MembershipListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: MembershipListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def refresh(self) -> MembershipSnapshot:
        """
        Reload both sets from the provider.

        Failures (e.g. not signed in) keep the previous snapshot.
        """
        if self._provider is None:
            return self._snapshot

        cart, wishlist = await asyncio.gather(
            self._provider.cart_ids(),
            self._provider.wishlist_ids(),
            return_exceptions=True,
        )
        if isinstance(cart, BaseException) or isinstance(wishlist, BaseException):
            error = cart if isinstance(cart, BaseException) else wishlist
            logger.warning("Membership refresh failed: %s", error)
            return self._snapshot

        self._snapshot = MembershipSnapshot(
            cart_ids=frozenset(cart),
            wishlist_ids=frozenset(wishlist),
        )
        return self._snapshot

    async def notify_changed(self) -> MembershipSnapshot:
        """Refresh and deliver the new snapshot to every subscriber."""
        snapshot = await self.refresh()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Membership listener failed")
        return snapshot

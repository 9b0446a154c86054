"""Tests for the membership tracker."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from shopsearch.config.errors import RemoteUnavailableError

from .models import MembershipSnapshot
from .tracker import MembershipTracker


@pytest.fixture
def provider() -> AsyncMock:
    mock = AsyncMock()
    mock.cart_ids.return_value = {"p1"}
    mock.wishlist_ids.return_value = {"p2", "p3"}
    return mock


async def test_refresh_loads_both_sets(provider: AsyncMock) -> None:
    tracker = MembershipTracker(provider)
    snapshot = await tracker.refresh()

    assert snapshot.in_cart("p1")
    assert not snapshot.in_cart("p2")
    assert snapshot.in_wishlist("p3")
    assert tracker.snapshot == snapshot


async def test_without_provider_snapshot_is_empty() -> None:
    tracker = MembershipTracker()
    snapshot = await tracker.refresh()
    assert snapshot == MembershipSnapshot()


async def test_failed_refresh_keeps_previous_snapshot(provider: AsyncMock) -> None:
    tracker = MembershipTracker(provider)
    await tracker.refresh()

    provider.wishlist_ids.side_effect = RemoteUnavailableError("401")
    snapshot = await tracker.refresh()

    assert snapshot.in_cart("p1")
    assert snapshot.in_wishlist("p2")


async def test_notify_changed_delivers_snapshot(provider: AsyncMock) -> None:
    tracker = MembershipTracker(provider)
    received: list[MembershipSnapshot] = []
    tracker.subscribe(received.append)

    provider.cart_ids.return_value = {"p1", "p9"}
    await tracker.notify_changed()

    assert len(received) == 1
    assert received[0].in_cart("p9")


async def test_unsubscribe_and_broken_listener(provider: AsyncMock) -> None:
    tracker = MembershipTracker(provider)
    received: list[MembershipSnapshot] = []

    def broken(snapshot: MembershipSnapshot) -> None:
        raise RuntimeError("listener bug")

    tracker.subscribe(broken)
    tracker.subscribe(received.append)
    tracker.subscribe(received.append)
    await tracker.notify_changed()
    assert len(received) == 1

    tracker.unsubscribe(received.append)
    await tracker.notify_changed()
    assert len(received) == 1

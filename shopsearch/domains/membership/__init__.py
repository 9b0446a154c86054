"""
Membership Domain - Cart/wishlist state used to decorate search results.

The search core only reads membership; changes are announced through
MembershipTracker.notify_changed() and delivered to subscribers.
"""

from .contracts import MembershipProvider
from .models import MembershipSnapshot
from .tracker import MembershipTracker

__all__ = [
    "MembershipProvider",
    "MembershipSnapshot",
    "MembershipTracker",
]

"""
catalog.py - Owner-curated gift catalog

Maps integer gift ids to Gift entries. Absence is encoded as the zero-value
sentinel EMPTY_GIFT: removing a gift makes it indistinguishable from one that
never existed.
"""

from __future__ import annotations
from typing import Dict, Optional

from .core import Gift, GiftId, EMPTY_GIFT, require_uint


class GiftCatalog:
    """Flat gift catalog keyed by administrator-chosen ids."""

    def __init__(self):
        self._gifts: Dict[GiftId, Gift] = {}

    def upsert(self, gift_id: GiftId, price: int, description: str) -> Gift:
        """Unconditionally overwrite the entry for gift_id."""
        require_uint(gift_id, "gift id")
        gift = Gift(price=price, description=description)
        if gift.exists:
            self._gifts[gift_id] = gift
        else:
            # An entry with no description is the sentinel
            self._gifts.pop(gift_id, None)
        return gift

    def remove(self, gift_id: GiftId) -> None:
        """Reset the entry to the empty sentinel."""
        require_uint(gift_id, "gift id")
        self._gifts.pop(gift_id, None)

    def lookup(self, gift_id: GiftId) -> Gift:
        """Return the gift, or EMPTY_GIFT for unknown ids."""
        return self._gifts.get(gift_id, EMPTY_GIFT)

    def get(self, gift_id: GiftId) -> Optional[Gift]:
        """Return the gift, or None for unknown ids."""
        return self._gifts.get(gift_id)

    def items(self) -> Dict[GiftId, Gift]:
        """Return a copy of every existing entry."""
        return dict(self._gifts)

    def snapshot(self) -> Dict[GiftId, Gift]:
        return dict(self._gifts)

    def restore(self, snapshot: Dict[GiftId, Gift]) -> None:
        self._gifts = dict(snapshot)

    def __contains__(self, gift_id: object) -> bool:
        return gift_id in self._gifts

    def __len__(self) -> int:
        return len(self._gifts)

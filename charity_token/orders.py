"""
orders.py - Pending fulfillment orders

OrderLedger keeps redemption orders in insertion order until the administrator
marks them fulfilled. Key behaviors:

    - Ids come from a pluggable generator. The default derives the id from the
      transaction timestamp; SequentialOrderIds is a monotonic alternative.
    - Every id ever issued is remembered. A repeated id raises DuplicateOrderId
      instead of producing two orders that share an identifier.
    - Lookup by (recipient, description) is a linear scan returning the first
      match in ledger order.
    - Removal compacts the sequence: later orders shift one slot toward the
      front, so relative order is always preserved. Removing an unknown id is
      a no-op.
"""

from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Set, Tuple
import hashlib

from .core import Identity, Order, OrderId, DuplicateOrderId, UINT256_MAX


# Generator type: (timestamp) -> 256-bit order id
OrderIdGenerator = Callable[[datetime], OrderId]

_EPOCH = datetime(1970, 1, 1)


def _epoch_micros(timestamp: datetime) -> int:
    """Integer microseconds since the epoch. Naive datetimes are read as UTC."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc).replace(tzinfo=None)
    return (timestamp - _EPOCH) // timedelta(microseconds=1)


def timestamp_order_id(timestamp: datetime) -> OrderId:
    """
    Derive an order id from a transaction timestamp.

    SHA-256 of the timestamp in microseconds, read as a big-endian 256-bit
    unsigned integer. Deterministic: the same timestamp always yields the
    same id, so two orders created at the same instant collide.
    """
    digest = hashlib.sha256(str(_epoch_micros(timestamp)).encode()).digest()
    return int.from_bytes(digest, "big")


class SequentialOrderIds:
    """
    Monotonic counter id generator.

    Ignores the timestamp. Starts at 1 so that 0 is never a real id.
    """

    def __init__(self, start: int = 1):
        if start < 1:
            raise ValueError(f"start must be positive, got {start}")
        self._next = start

    def __call__(self, timestamp: datetime) -> OrderId:
        order_id = self._next
        if order_id > UINT256_MAX:
            raise OverflowError("order id space exhausted")
        self._next += 1
        return order_id

    @property
    def next_id(self) -> int:
        return self._next


class OrderLedger:
    """
    Ordered list of pending orders, owned exclusively by the ledger.

    Example:
        ledger = OrderLedger(SequentialOrderIds())
        order = ledger.insert("alice", "Book", datetime(2025, 1, 1))
        ledger.find_id("alice", "Book")   # order.order_id
        ledger.remove(order.order_id)
        ledger.find_id("alice", "Book")   # None
    """

    def __init__(self, id_generator: Optional[OrderIdGenerator] = None):
        self._id_generator: OrderIdGenerator = id_generator or timestamp_order_id
        self._orders: List[Order] = []
        self._issued_ids: Set[OrderId] = set()

    def list_all(self) -> List[Order]:
        """Return every pending order in ledger order."""
        return list(self._orders)

    def insert(self, recipient: Identity, description: str, timestamp: datetime) -> Order:
        """
        Append a new order for (recipient, description).

        Args:
            recipient: Identity that redeemed
            description: Gift description
            timestamp: Transaction timestamp the id is derived from

        Returns:
            The created Order

        Raises:
            DuplicateOrderId: If the generator returns an id already issued
        """
        order_id = self._id_generator(timestamp)
        if not isinstance(order_id, int) or not 0 <= order_id <= UINT256_MAX:
            raise ValueError(f"order id generator returned invalid id {order_id!r}")
        if order_id in self._issued_ids:
            raise DuplicateOrderId(
                f"order id {order_id:#x} already issued (timestamp {timestamp.isoformat()})"
            )
        order = Order(order_id=order_id, recipient=recipient, description=description)
        self._orders.append(order)
        self._issued_ids.add(order_id)
        return order

    def find_id(self, recipient: Identity, description: str) -> Optional[OrderId]:
        """Return the id of the first matching order, or None."""
        for order in self._orders:
            if order.matches(recipient, description):
                return order.order_id
        return None

    def remove(self, order_id: OrderId) -> Optional[Order]:
        """
        Remove the order with order_id, keeping the rest in order.

        Returns:
            The removed Order, or None if no order had that id
        """
        for index, order in enumerate(self._orders):
            if order.order_id == order_id:
                # del shifts every later element toward the front
                del self._orders[index]
                return order
        return None

    def was_issued(self, order_id: OrderId) -> bool:
        """True if order_id was ever produced by this ledger, pending or not."""
        return order_id in self._issued_ids

    def snapshot(self) -> Tuple[List[Order], Set[OrderId]]:
        return list(self._orders), set(self._issued_ids)

    def restore(self, snapshot: Tuple[List[Order], Set[OrderId]]) -> None:
        orders, issued = snapshot
        self._orders = list(orders)
        self._issued_ids = set(issued)

    def __len__(self) -> int:
        return len(self._orders)

    def __iter__(self):
        return iter(list(self._orders))

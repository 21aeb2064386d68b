"""
Core types and pure functions for the charity token system.

This module provides the foundational data structures shared by every component:
1. Constants: unsigned 256-bit bounds and the existence sentinels
2. Immutable data structures: Gift, Order, Receipt
3. Enums: CheckOrder policy for the redemption workflow
4. Exceptions: CharityTokenError and domain-specific error types
5. Validation helpers for unsigned quantities

Nothing in this module holds state. Components in balances.py, catalog.py and
orders.py own the mutable stores; token.py wires them together.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Hashable, Any, Tuple


# ============================================================================
# CONSTANTS
# ============================================================================

# Largest representable quantity. Balances, prices, rates and ids are all
# unsigned 256-bit integers.
UINT256_MAX = 2 ** 256 - 1


# ============================================================================
# TYPE ALIASES
# ============================================================================

# Opaque account address. Anything hashable and equality-comparable works;
# plain strings are the usual choice.
Identity = Hashable

# Administrator-chosen integer key into the gift catalog.
GiftId = int

# 256-bit order identifier.
OrderId = int


# ============================================================================
# ENUMS
# ============================================================================

class CheckOrder(Enum):
    """
    Order in which redemption validates the caller's request.

    BALANCE_FIRST: Balance is checked before gift existence. A caller with an
                   empty balance redeeming an unknown gift gets
                   InsufficientBalance. Default.
    EXISTENCE_FIRST: Gift existence is checked first, so unknown gifts always
                     report UnknownGift.
    """
    BALANCE_FIRST = "balance_first"
    EXISTENCE_FIRST = "existence_first"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class CharityTokenError(Exception):
    """Base exception for all charity token errors."""
    pass


class Unauthorized(CharityTokenError):
    """Raised when a non-administrator invokes an administrator-only operation."""
    pass


class InsufficientBalance(CharityTokenError):
    """Raised when a debit or redemption exceeds the account's balance."""
    pass


class UnknownGift(CharityTokenError):
    """Raised when redeeming a gift id whose catalog entry is the empty sentinel."""
    pass


class DivisionByZero(CharityTokenError, ZeroDivisionError):
    """Raised when minting while the basis rate is zero."""
    pass


class Overflow(CharityTokenError, OverflowError):
    """Raised when a credit would push a balance past UINT256_MAX."""
    pass


class DuplicateOrderId(CharityTokenError):
    """Raised when the order id generator yields an id that was already issued."""
    pass


# ============================================================================
# VALIDATION
# ============================================================================

def require_uint(value: Any, what: str) -> int:
    """
    Validate that value is an unsigned 256-bit integer.

    Args:
        value: Candidate quantity
        what: Name used in the error message

    Returns:
        The value, unchanged

    Raises:
        ValueError: If value is not an int (bools rejected), is negative,
                    or exceeds UINT256_MAX
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} must be int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{what} must be non-negative, got {value}")
    if value > UINT256_MAX:
        raise ValueError(f"{what} exceeds 256-bit range")
    return value


# ============================================================================
# CORE DATA STRUCTURES
# ============================================================================

@dataclass(frozen=True, slots=True)
class Gift:
    """
    A catalog entry redeemable for tokens.

    Attributes:
        price: Token cost (may legitimately be zero).
        description: Human-readable description. An empty description means
                     "no such gift"; this is the catalog's existence test.
    """
    price: int = 0
    description: str = ""

    def __post_init__(self):
        require_uint(self.price, "Gift price")
        if not isinstance(self.description, str):
            raise ValueError(f"Gift description must be str, got {type(self.description).__name__}")

    @property
    def exists(self) -> bool:
        """True unless this is the zero-value sentinel."""
        return self.description != ""

    def __repr__(self) -> str:
        if not self.exists:
            return "Gift(<none>)"
        return f"Gift({self.description!r} @ {self.price})"


# Zero-value entry returned for unknown or removed gift ids.
EMPTY_GIFT = Gift()


@dataclass(frozen=True, slots=True)
class Order:
    """
    A completed redemption awaiting fulfillment.

    Attributes:
        order_id: 256-bit identifier, unique within the ledger and never reused.
        recipient: Identity that redeemed the gift.
        description: Description of the redeemed gift.
    """
    order_id: int
    recipient: Identity
    description: str

    def matches(self, recipient: Identity, description: str) -> bool:
        """Content equality on the (recipient, description) pair."""
        return self.recipient == recipient and self.description == description

    def __repr__(self) -> str:
        return f"Order({self.order_id:#x}: {self.description!r} → {self.recipient})"


@dataclass(frozen=True, slots=True)
class Receipt:
    """
    Executed, immutable record of a committed operation.

    Attributes:
        sequence_number: Monotonic position within the token (from 0)
        operation: Public operation name (e.g., "send_tokens")
        caller: Identity that invoked the operation
        timestamp: Logical time at which it committed
        notifications: Notifications the operation emitted
    """
    sequence_number: int
    operation: str
    caller: Identity
    timestamp: datetime
    notifications: Tuple[Any, ...] = ()

    def __repr__(self) -> str:
        return f"Receipt(#{self.sequence_number} {self.operation} by {self.caller!r} @ {self.timestamp})"

"""
charity_token - Token Issuance and Gift Redemption Ledger

A single-administrator token ledger: the administrator mints tokens for
received donations, curates a gift catalog, and drains the queue of orders
that redemptions create.

Usage:
    from charity_token import CharityToken, SequentialOrderIds

    # Default order ids are derived from the logical clock: without
    # SequentialOrderIds, call token.advance_time(...) between redemptions or
    # the second one raises DuplicateOrderId.
    token = CharityToken("admin", basis_rate=10, verbose=False,
                         order_ids=SequentialOrderIds())

    # Mint: 105 currency units at rate 10 -> 10 tokens
    token.send_tokens("admin", "alice", 105)

    # Curate the catalog and redeem
    token.add_gift("admin", 1, 10, "Book")
    order = token.redeem_tokens("alice", 1)

    # Fulfil
    token.finish_order("admin", order.order_id)
"""

# Core types
from .core import (
    Identity,
    GiftId,
    OrderId,
    Gift,
    Order,
    Receipt,
    CheckOrder,
    CharityTokenError,
    Unauthorized,
    InsufficientBalance,
    UnknownGift,
    DivisionByZero,
    Overflow,
    DuplicateOrderId,
    EMPTY_GIFT,
    UINT256_MAX,
    require_uint,
)

# Components
from .access import AccessControl
from .balances import BalanceStore
from .catalog import GiftCatalog
from .orders import (
    OrderLedger,
    OrderIdGenerator,
    SequentialOrderIds,
    timestamp_order_id,
)

# Notifications
from .events import (
    TokensSent,
    BasisRateChange,
    TokensRedeem,
    Notification,
    NotificationHandler,
    EventLog,
)

# Orchestrator
from .token import CharityToken

__all__ = [
    # Core
    'Identity', 'GiftId', 'OrderId', 'Gift', 'Order', 'Receipt', 'CheckOrder',
    'CharityTokenError', 'Unauthorized', 'InsufficientBalance', 'UnknownGift',
    'DivisionByZero', 'Overflow', 'DuplicateOrderId',
    'EMPTY_GIFT', 'UINT256_MAX', 'require_uint',
    # Components
    'AccessControl', 'BalanceStore', 'GiftCatalog',
    'OrderLedger', 'OrderIdGenerator', 'SequentialOrderIds', 'timestamp_order_id',
    # Notifications
    'TokensSent', 'BasisRateChange', 'TokensRedeem',
    'Notification', 'NotificationHandler', 'EventLog',
    # Orchestrator
    'CharityToken',
]

__version__ = '1.0.0'

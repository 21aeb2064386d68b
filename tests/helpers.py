"""
helpers.py - Test helpers for charity token tests

Plain functions shared by fixtures and by hypothesis tests, which cannot use
function-scoped fixtures.
"""

from datetime import datetime
from typing import Any, Dict

from charity_token import CharityToken, SequentialOrderIds


ADMIN = "admin"
START = datetime(2025, 1, 1)


def make_token(basis_rate: int = 10, **kwargs) -> CharityToken:
    """Create a quiet token with sequential order ids unless told otherwise."""
    kwargs.setdefault("initial_time", START)
    kwargs.setdefault("verbose", False)
    kwargs.setdefault("order_ids", SequentialOrderIds())
    return CharityToken(ADMIN, basis_rate, **kwargs)


def capture_state(token: CharityToken, accounts=("alice", "bob", "carol")) -> Dict[str, Any]:
    """Snapshot everything a failed operation must leave untouched."""
    return {
        "balances": {a: token.check_balance(a) for a in accounts},
        "gifts": token.list_gifts(),
        "orders": token.view_orders(ADMIN),
        "basis_rate": token.basis_rate,
        "minted": token.total_minted,
        "redeemed": token.total_redeemed,
        "receipts": len(token.receipts),
        "events": len(token.events),
    }

"""
balances.py - Per-account token balances

One unsigned counter per identity. Credits are bounded by UINT256_MAX and
debits are checked before they are applied, so a balance can never go
negative or wrap around.
"""

from __future__ import annotations
from typing import Dict

from .core import (
    Identity, UINT256_MAX,
    InsufficientBalance, Overflow,
    require_uint,
)


class BalanceStore:
    """
    Mapping from identity to token count.

    Unknown accounts read as zero. Zero balances are dropped from the
    underlying dict to keep it compact.
    """

    def __init__(self):
        self._balances: Dict[Identity, int] = {}

    def balance_of(self, account: Identity) -> int:
        """Return the account's balance (0 if never credited)."""
        return self._balances.get(account, 0)

    def credit(self, account: Identity, amount: int) -> int:
        """
        Increase an account's balance.

        Args:
            account: Identity to credit
            amount: Tokens to add

        Returns:
            The credited amount (not the running total)

        Raises:
            Overflow: If the resulting balance would exceed UINT256_MAX
        """
        require_uint(amount, "credit amount")
        current = self.balance_of(account)
        if amount > UINT256_MAX - current:
            raise Overflow(f"crediting {amount} to {account!r} overflows balance {current}")
        self._set(account, current + amount)
        return amount

    def debit(self, account: Identity, amount: int) -> int:
        """
        Decrease an account's balance by exactly amount.

        Returns:
            The remaining balance

        Raises:
            InsufficientBalance: If amount exceeds the current balance
        """
        require_uint(amount, "debit amount")
        current = self.balance_of(account)
        if amount > current:
            raise InsufficientBalance(f"{account!r}: {amount} > balance {current}")
        self._set(account, current - amount)
        return current - amount

    def total_supply(self) -> int:
        """Sum of every account's balance."""
        return sum(self._balances.values())

    def accounts(self) -> Dict[Identity, int]:
        """Return a copy of all non-zero balances."""
        return dict(self._balances)

    def _set(self, account: Identity, value: int) -> None:
        if value:
            self._balances[account] = value
        else:
            self._balances.pop(account, None)

    # Snapshot support for atomic rollback

    def snapshot(self) -> Dict[Identity, int]:
        return dict(self._balances)

    def restore(self, snapshot: Dict[Identity, int]) -> None:
        self._balances = dict(snapshot)

    def __len__(self) -> int:
        return len(self._balances)

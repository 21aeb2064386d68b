"""
token.py - Charity token orchestrator

CharityToken is the single state owner of the system. It wires a BalanceStore,
a GiftCatalog and an OrderLedger together behind one lock and exposes the
public operation surface.

Key responsibilities:
    - Gates administrator-only operations through AccessControl
    - Converts received currency into tokens at the basis rate (rounding down)
    - Runs the redemption workflow: check, debit, queue an order, notify
    - Executes every operation atomically (all effects commit or none do)
    - Records a receipt for every committed operation
"""

from __future__ import annotations
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional
import threading

from .access import AccessControl
from .balances import BalanceStore
from .catalog import GiftCatalog
from .core import (
    # Types
    Identity, Gift, GiftId, Order, OrderId, Receipt, CheckOrder,
    # Exceptions
    Unauthorized, InsufficientBalance, UnknownGift, DivisionByZero,
    # Helpers
    require_uint,
)
from .events import (
    EventLog, Notification, NotificationHandler,
    TokensSent, BasisRateChange, TokensRedeem,
)
from .orders import OrderLedger, OrderIdGenerator


class CharityToken:
    """
    Token issuance and gift redemption ledger with an embedded order queue.

    Design Principles:
        - One writer at a time: every public call holds the token's lock for
          its full duration, so operations are linearizable.
        - All or nothing: state is snapshotted on entry and restored if the
          operation raises. Failed operations emit nothing and log nothing.
        - Notifications are delivered only after commit.

    Order ids default to timestamp_order_id, derived from current_time. The
    clock only moves through advance_time, so a second redemption at the same
    logical time (by any account) raises DuplicateOrderId. Either advance the
    clock between redemptions or pass order_ids=SequentialOrderIds().

    Example:
        token = CharityToken("admin", basis_rate=10, verbose=False)
        token.send_tokens("admin", "alice", 105)      # alice gets 10 tokens
        token.add_gift("admin", 1, 10, "Book")
        order = token.redeem_tokens("alice", 1)
        token.finish_order("admin", order.order_id)
    """

    def __init__(
        self,
        administrator: Identity,
        basis_rate: int,
        *,
        name: str = "charity",
        initial_time: Optional[datetime] = None,
        verbose: bool = True,
        order_ids: Optional[OrderIdGenerator] = None,
        check_order: CheckOrder = CheckOrder.BALANCE_FIRST,
    ):
        """
        Create a token.

        Args:
            administrator: The deploying identity; fixed for the token's lifetime
            basis_rate: Currency units per token (zero is accepted)
            name: Token identifier used in output
            initial_time: Starting logical time (default: 1970-01-01)
            verbose: Print a line per committed or rejected operation (default: True)
            order_ids: Order id generator (default: timestamp-derived ids)
            check_order: Redemption check ordering (default: balance first)
        """
        self.name = name
        self.verbose = verbose
        self.check_order = CheckOrder(check_order)
        self._access = AccessControl(administrator)
        self._basis_rate: int = require_uint(basis_rate, "basis rate")
        self._balances = BalanceStore()
        self._catalog = GiftCatalog()
        self._orders = OrderLedger(order_ids)
        self._current_time: datetime = initial_time or datetime(1970, 1, 1)
        self.events = EventLog()
        self.receipts: List[Receipt] = []
        self.total_minted: int = 0
        self.total_redeemed: int = 0
        self._next_sequence: int = 0
        self._lock = threading.RLock()

    # ========================================================================
    # READ-ONLY PROPERTIES
    # ========================================================================

    @property
    def administrator(self) -> Identity:
        return self._access.administrator

    @property
    def basis_rate(self) -> int:
        return self._basis_rate

    @property
    def current_time(self) -> datetime:
        """Current logical time; order ids are derived from it."""
        return self._current_time

    def is_administrator(self, caller: Identity) -> bool:
        return self._access.is_administrator(caller)

    # ========================================================================
    # TIME MANAGEMENT
    # ========================================================================

    def advance_time(self, new_time: datetime) -> None:
        """
        Advance the logical clock.

        Raises:
            ValueError: If new_time is before the current time
        """
        with self._lock:
            if new_time < self._current_time:
                raise ValueError(
                    f"Cannot move time backwards: {new_time} < {self._current_time}"
                )
            self._current_time = new_time

    # ========================================================================
    # ORDER MANAGEMENT (administrator)
    # ========================================================================

    def view_orders(self, caller: Identity) -> List[Order]:
        """Return every pending order in ledger order."""
        with self._lock:
            self._require_reader("view_orders", caller)
            return self._orders.list_all()

    def find_order_id(
        self, caller: Identity, recipient: Identity, description: str
    ) -> Optional[OrderId]:
        """Return the id of the first pending order matching (recipient, description), or None."""
        with self._lock:
            self._require_reader("find_order_id", caller)
            return self._orders.find_id(recipient, description)

    def _require_reader(self, operation: str, caller: Identity) -> None:
        """Administrator gate for read-only calls; logs rejections like _operation."""
        try:
            self._access.require_administrator(caller, operation)
        except Unauthorized as exc:
            if self.verbose:
                print(f"✗ REJECTED {operation} by {caller!r}: {exc}")
            raise

    def finish_order(self, caller: Identity, order_id: OrderId) -> Optional[Order]:
        """
        Remove a fulfilled order.

        Unknown ids are a silent no-op.

        Returns:
            The removed Order, or None if nothing matched
        """
        with self._operation("finish_order", caller, admin_only=True):
            return self._orders.remove(order_id)

    # ========================================================================
    # CATALOG MANAGEMENT (administrator)
    # ========================================================================

    def add_gift(self, caller: Identity, gift_id: GiftId, price: int, description: str) -> Gift:
        """Create or overwrite a catalog entry."""
        with self._operation("add_gift", caller, admin_only=True):
            return self._catalog.upsert(gift_id, price, description)

    def remove_gift(self, caller: Identity, gift_id: GiftId) -> None:
        """Reset a catalog entry to the empty sentinel."""
        with self._operation("remove_gift", caller, admin_only=True):
            self._catalog.remove(gift_id)

    def get_gift(self, gift_id: GiftId) -> Optional[Gift]:
        """Return the catalog entry for gift_id, or None. Open to any caller."""
        with self._lock:
            return self._catalog.get(gift_id)

    def list_gifts(self) -> Dict[GiftId, Gift]:
        """Return every existing catalog entry. Open to any caller."""
        with self._lock:
            return self._catalog.items()

    # ========================================================================
    # ISSUANCE (administrator)
    # ========================================================================

    def set_basis_rate(self, caller: Identity, new_rate: int) -> None:
        """
        Replace the basis rate.

        Zero is accepted here; the next send_tokens then fails with DivisionByZero.
        """
        with self._operation("set_basis_rate", caller, admin_only=True) as emit:
            self._basis_rate = require_uint(new_rate, "basis rate")
            emit(BasisRateChange(new_rate=new_rate))

    def send_tokens(self, caller: Identity, to: Identity, received_amount: int) -> int:
        """
        Mint tokens for a received currency amount.

        tokens = received_amount // basis_rate; the remainder is discarded.

        Returns:
            Number of tokens credited

        Raises:
            DivisionByZero: If the basis rate is zero
            Overflow: If the recipient's balance would exceed UINT256_MAX
        """
        with self._operation("send_tokens", caller, admin_only=True) as emit:
            require_uint(received_amount, "received amount")
            if self._basis_rate == 0:
                raise DivisionByZero("basis rate is zero")
            tokens = received_amount // self._basis_rate
            credited = self._balances.credit(to, tokens)
            self.total_minted += credited
            emit(TokensSent(recipient=to, tokens=credited))
            return credited

    # ========================================================================
    # REDEMPTION (any caller)
    # ========================================================================

    def redeem_tokens(self, caller: Identity, gift_id: GiftId) -> Order:
        """
        Spend the caller's own tokens on a catalog gift.

        Workflow:
        1. Look up the gift
        2. Balance check: InsufficientBalance if the caller holds no tokens
           or fewer than the price
        3. Existence check: UnknownGift if the entry is the empty sentinel
        4. Debit the price
        5. Queue an order for (caller, description)
        6. Emit TokensRedeem

        With CheckOrder.EXISTENCE_FIRST steps 2 and 3 swap.

        Returns:
            The queued Order
        """
        with self._operation("redeem_tokens", caller) as emit:
            require_uint(gift_id, "gift id")
            gift = self._catalog.lookup(gift_id)

            if self.check_order is CheckOrder.EXISTENCE_FIRST:
                self._require_gift_exists(gift_id, gift)
            self._require_can_afford(caller, gift)
            if self.check_order is CheckOrder.BALANCE_FIRST:
                self._require_gift_exists(gift_id, gift)

            self._balances.debit(caller, gift.price)
            order = self._orders.insert(caller, gift.description, self._current_time)
            self.total_redeemed += gift.price
            emit(TokensRedeem(price=gift.price, description=gift.description))
            return order

    def check_balance(self, caller: Identity) -> int:
        """Return the caller's own balance."""
        with self._lock:
            return self._balances.balance_of(caller)

    def _require_can_afford(self, caller: Identity, gift: Gift) -> None:
        balance = self._balances.balance_of(caller)
        # The balance == 0 clause is load-bearing: an unknown gift has price 0,
        # and an empty account redeeming it must get InsufficientBalance under
        # BALANCE_FIRST. Side effect: zero-priced gifts need a non-empty balance.
        if balance == 0 or balance < gift.price:
            raise InsufficientBalance(f"{caller!r}: balance {balance} < price {gift.price}")

    @staticmethod
    def _require_gift_exists(gift_id: GiftId, gift: Gift) -> None:
        if not gift.exists:
            raise UnknownGift(f"gift {gift_id} does not exist")

    # ========================================================================
    # SUPPLY AND CONSERVATION
    # ========================================================================

    def total_supply(self) -> int:
        """Sum of all balances."""
        with self._lock:
            return self._balances.total_supply()

    def verify_conservation(self) -> Dict[str, Any]:
        """
        Verify that every token in circulation was minted and not yet redeemed.

        Returns:
            Dict with keys:
            - 'valid': bool - True if total_supply == minted - redeemed
            - 'total_supply': int - Sum of all balances
            - 'minted': int - Tokens ever minted
            - 'redeemed': int - Tokens ever spent on gifts
            - 'difference': int - total_supply - (minted - redeemed)

        Example:
            result = token.verify_conservation()
            assert result['valid'], f"Conservation violated: {result}"
        """
        with self._lock:
            supply = self._balances.total_supply()
            expected = self.total_minted - self.total_redeemed
            return {
                'valid': supply == expected,
                'total_supply': supply,
                'minted': self.total_minted,
                'redeemed': self.total_redeemed,
                'difference': supply - expected,
            }

    # ========================================================================
    # ATOMIC EXECUTION
    # ========================================================================

    def subscribe(self, handler: NotificationHandler) -> None:
        """Register a handler for notifications of committed operations."""
        self.events.subscribe(handler)

    def _snapshot(self) -> Dict[str, Any]:
        return {
            'balances': self._balances.snapshot(),
            'catalog': self._catalog.snapshot(),
            'orders': self._orders.snapshot(),
            'basis_rate': self._basis_rate,
            'total_minted': self.total_minted,
            'total_redeemed': self.total_redeemed,
        }

    def _restore(self, snapshot: Dict[str, Any]) -> None:
        self._balances.restore(snapshot['balances'])
        self._catalog.restore(snapshot['catalog'])
        self._orders.restore(snapshot['orders'])
        self._basis_rate = snapshot['basis_rate']
        self.total_minted = snapshot['total_minted']
        self.total_redeemed = snapshot['total_redeemed']

    @contextmanager
    def _operation(self, operation: str, caller: Identity, admin_only: bool = False) -> Iterator:
        """
        Run one public operation as an indivisible unit.

        Yields an emit(notification) callable. Emitted notifications are held
        back until the body finishes; if the body raises, state is restored
        from the entry snapshot and the exception propagates.

        The snapshot copies balances, catalog, pending orders and the set of
        issued order ids on every call, so cost grows with ledger size (the
        issued-id set is never pruned). Moving to an undo log of touched keys
        would make rollback proportional to the operation instead.
        """
        with self._lock:
            snapshot = self._snapshot()
            pending: List[Notification] = []
            try:
                if admin_only:
                    self._access.require_administrator(caller, operation)
                yield pending.append
            except Exception as exc:
                self._restore(snapshot)
                if self.verbose:
                    print(f"✗ REJECTED {operation} by {caller!r}: {exc}")
                raise

            receipt = Receipt(
                sequence_number=self._next_sequence,
                operation=operation,
                caller=caller,
                timestamp=self._current_time,
                notifications=tuple(pending),
            )
            self._next_sequence += 1
            self.receipts.append(receipt)
            if self.verbose:
                print(f"✓ {operation} by {caller!r} [#{receipt.sequence_number}]")
            self.events.publish(pending)

    def __repr__(self) -> str:
        return (
            f"CharityToken({self.name!r}, administrator={self.administrator!r}, "
            f"basis_rate={self._basis_rate}, orders={len(self._orders)})"
        )

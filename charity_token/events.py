"""
events.py - Fire-and-forget notifications

Notifications are just data, subscribers are just functions. The token never
reads its own notifications back; they exist for outside observers.

Core concepts:
1. Notification dataclasses: TokensSent, BasisRateChange, TokensRedeem
2. EventLog: delivered history plus a list of subscriber callables
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterable, List, Union

from .core import Identity


# ============================================================================
# NOTIFICATIONS
# ============================================================================

@dataclass(frozen=True, slots=True)
class TokensSent:
    """Tokens were minted to recipient. tokens is the credited amount, not the new total."""
    recipient: Identity
    tokens: int


@dataclass(frozen=True, slots=True)
class BasisRateChange:
    """The administrator set a new basis rate."""
    new_rate: int


@dataclass(frozen=True, slots=True)
class TokensRedeem:
    """A gift was redeemed."""
    price: int
    description: str


Notification = Union[TokensSent, BasisRateChange, TokensRedeem]

# Subscriber type: (notification) -> None
NotificationHandler = Callable[[Notification], None]


# ============================================================================
# EVENT LOG
# ============================================================================

class EventLog:
    """
    Delivered notification history with subscriber fan-out.

    Delivery happens in publish order. A subscriber that raises stops delivery
    of the remaining notifications in that batch and the exception propagates
    to whoever published.
    """

    def __init__(self):
        self._history: List[Notification] = []
        self._subscribers: List[NotificationHandler] = []

    def subscribe(self, handler: NotificationHandler) -> None:
        """Register a handler to be called for every delivered notification."""
        self._subscribers.append(handler)

    def unsubscribe(self, handler: NotificationHandler) -> None:
        """Remove a previously registered handler."""
        self._subscribers.remove(handler)

    def publish(self, notifications: Iterable[Notification]) -> None:
        for notification in notifications:
            self._history.append(notification)
            for handler in list(self._subscribers):
                handler(notification)

    @property
    def history(self) -> List[Notification]:
        return list(self._history)

    def of_type(self, kind: type) -> List[Notification]:
        """Return delivered notifications of one class."""
        return [n for n in self._history if isinstance(n, kind)]

    def __len__(self) -> int:
        return len(self._history)

"""
access.py - Single-administrator access control

The administrator identity is fixed at construction. There is no transfer
operation: a token has exactly one privileged account for its whole life.
"""

from __future__ import annotations

from .core import Identity, Unauthorized


class AccessControl:
    """
    Guard predicate over a single designated administrator.

    Example:
        access = AccessControl("treasury")
        access.is_administrator("treasury")   # True
        access.require_administrator("bob", "add_gift")  # raises Unauthorized
    """

    __slots__ = ("_administrator",)

    def __init__(self, administrator: Identity):
        if administrator is None:
            raise ValueError("administrator cannot be None")
        self._administrator = administrator

    @property
    def administrator(self) -> Identity:
        return self._administrator

    def is_administrator(self, caller: Identity) -> bool:
        """Return True if caller is the administrator."""
        return caller == self._administrator

    def require_administrator(self, caller: Identity, operation: str) -> None:
        """
        Fail unless caller is the administrator.

        Raises:
            Unauthorized: If caller is anyone else
        """
        if not self.is_administrator(caller):
            raise Unauthorized(f"{caller!r} may not call {operation}")

    def __repr__(self) -> str:
        return f"AccessControl(administrator={self._administrator!r})"

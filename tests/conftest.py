"""
conftest.py - Shared pytest fixtures for charity token tests

Provides common fixtures used across unit, conformance and functional tests:
- Bare tokens (no balances, empty catalog)
- Funded tokens with a small gift catalog
"""

import pytest

from tests.helpers import ADMIN, make_token


@pytest.fixture
def token():
    """Fresh token at basis rate 10."""
    return make_token()


@pytest.fixture
def funded_token():
    """Token with alice=10, bob=5 tokens and a two-entry catalog."""
    t = make_token()
    t.send_tokens(ADMIN, "alice", 105)
    t.send_tokens(ADMIN, "bob", 50)
    t.add_gift(ADMIN, 1, 10, "Book")
    t.add_gift(ADMIN, 2, 3, "Pen")
    return t

"""
Conservation Conformance Tests

INVARIANT: For every account a, at all times:
    balance(a) = Σ (amount_i // rate_i) over mints to a
               - Σ price_j over successful redemptions by a

and therefore total_supply = total_minted - total_redeemed.

Tokens enter only through send_tokens and leave only through redeem_tokens.
"""

import pytest
from hypothesis import given, settings, note
from hypothesis import strategies as st

from charity_token import CharityTokenError, InsufficientBalance, UnknownGift
from tests.helpers import ADMIN, make_token


ACCOUNTS = ["alice", "bob", "carol"]

# Fixed catalog; id 9 is never added
CATALOG = {1: (10, "Book"), 2: (3, "Pen"), 3: (0, "Sticker")}


# =============================================================================
# STRATEGIES FOR PROPERTY-BASED TESTING
# =============================================================================

mint_op = st.tuples(
    st.just("mint"),
    st.sampled_from(ACCOUNTS),
    st.integers(min_value=0, max_value=500),
)

rate_op = st.tuples(
    st.just("rate"),
    st.integers(min_value=1, max_value=50),
)

redeem_op = st.tuples(
    st.just("redeem"),
    st.sampled_from(ACCOUNTS),
    st.sampled_from([1, 2, 3, 9]),
)

operations = st.lists(st.one_of(mint_op, rate_op, redeem_op), max_size=40)


def _catalog_token():
    token = make_token(basis_rate=10)
    for gift_id, (price, description) in CATALOG.items():
        token.add_gift(ADMIN, gift_id, price, description)
    return token


def _expected_redeem_error(balance, gift_id):
    price, _ = CATALOG.get(gift_id, (0, ""))
    if balance == 0 or balance < price:
        return InsufficientBalance
    if gift_id not in CATALOG:
        return UnknownGift
    return None


class TestConservationProperties:
    """Property-based conservation tests."""

    @given(operations)
    @settings(max_examples=200)
    def test_balances_match_model(self, ops):
        """
        PROPERTY: Each balance equals minted tokens minus redeemed prices,
        using the rate in force at each mint.
        """
        token = _catalog_token()
        rate = 10
        model = {a: 0 for a in ACCOUNTS}

        for op in ops:
            note(repr(op))
            if op[0] == "mint":
                _, account, amount = op
                token.send_tokens(ADMIN, account, amount)
                model[account] += amount // rate
            elif op[0] == "rate":
                rate = op[1]
                token.set_basis_rate(ADMIN, rate)
            else:
                _, account, gift_id = op
                expected_error = _expected_redeem_error(model[account], gift_id)
                if expected_error is None:
                    token.redeem_tokens(account, gift_id)
                    model[account] -= CATALOG[gift_id][0]
                else:
                    with pytest.raises(expected_error):
                        token.redeem_tokens(account, gift_id)

            for account in ACCOUNTS:
                assert token.check_balance(account) == model[account]

        result = token.verify_conservation()
        assert result['valid'], result
        assert result['total_supply'] == sum(model.values())

    @given(operations)
    @settings(max_examples=100)
    def test_balances_never_negative(self, ops):
        """PROPERTY: No sequence of operations drives a balance below zero."""
        token = _catalog_token()
        for op in ops:
            try:
                if op[0] == "mint":
                    token.send_tokens(ADMIN, op[1], op[2])
                elif op[0] == "rate":
                    token.set_basis_rate(ADMIN, op[1])
                else:
                    token.redeem_tokens(op[1], op[2])
            except CharityTokenError:
                pass
            assert all(token.check_balance(a) >= 0 for a in ACCOUNTS)

    @given(st.lists(st.integers(min_value=0, max_value=10 ** 6), min_size=1, max_size=20),
           st.integers(min_value=1, max_value=1000))
    def test_mint_rounds_down(self, amounts, rate):
        """PROPERTY: Minting discards the fractional remainder of every deposit."""
        token = make_token(basis_rate=rate)
        for amount in amounts:
            token.send_tokens(ADMIN, "alice", amount)
        assert token.check_balance("alice") == sum(a // rate for a in amounts)
        assert token.total_minted == token.check_balance("alice")


class TestConservationExamples:
    """Explicit conservation examples."""

    def test_redemption_removes_price_from_supply(self, funded_token):
        before = funded_token.total_supply()
        funded_token.redeem_tokens("alice", 1)
        assert funded_token.total_supply() == before - 10

    def test_failed_redemption_preserves_supply(self, funded_token):
        before = funded_token.total_supply()
        with pytest.raises(InsufficientBalance):
            funded_token.redeem_tokens("bob", 1)
        assert funded_token.total_supply() == before
        assert funded_token.verify_conservation()['valid']

    def test_finishing_orders_does_not_touch_supply(self, funded_token):
        order = funded_token.redeem_tokens("bob", 2)
        before = funded_token.total_supply()
        funded_token.finish_order(ADMIN, order.order_id)
        assert funded_token.total_supply() == before

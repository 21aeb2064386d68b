"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the charity token.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. conservation.py - Balances equal minted tokens minus redeemed prices
2. atomicity.py - Failed operations change nothing
3. ordering.py - Order ledger keeps insertion order and unique ids
4. check_order.py - Redemption reports errors in a fixed order
5. linearizability.py - Concurrent calls match a serial order

These tests use hypothesis for property-based testing.
"""

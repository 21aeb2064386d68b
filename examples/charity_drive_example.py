"""
Example: A small charity drive.

The foundation mints tokens for donations, publishes a gift catalog, lets
donors redeem their tokens, and ships the resulting orders.
"""

from datetime import datetime, timedelta
from charity_token import CharityToken, InsufficientBalance, UnknownGift


def main():
    print("=" * 80)
    print("CHARITY DRIVE - Donations, Gifts and Fulfilment")
    print("=" * 80)
    print()

    start = datetime(2025, 3, 1, 9, 0)
    token = CharityToken("foundation", basis_rate=100, initial_time=start, verbose=True)
    token.subscribe(lambda n: print(f"   notification: {n}"))

    print()
    print("Example 1: Donations")
    print("-" * 80)
    print("Donations arrive in cents. At 100 cents per token, remainders are dropped.")
    print()

    token.send_tokens("foundation", "alice", 2_550)
    token.send_tokens("foundation", "bob", 999)

    print()
    print(f"alice: {token.check_balance('alice')} tokens")
    print(f"bob:   {token.check_balance('bob')} tokens")
    print()

    print("Example 2: Catalog")
    print("-" * 80)
    token.add_gift("foundation", 1, 20, "Tote bag")
    token.add_gift("foundation", 2, 5, "Sticker pack")
    for gift_id, gift in sorted(token.list_gifts().items()):
        print(f"   [{gift_id}] {gift.description:<15} {gift.price:>4} tokens")
    print()

    print("Example 3: Redemption")
    print("-" * 80)
    token.redeem_tokens("alice", 1)
    # Timestamp-derived order ids need a fresh timestamp per order
    token.advance_time(start + timedelta(minutes=5))
    token.redeem_tokens("bob", 2)

    try:
        token.redeem_tokens("bob", 1)
    except InsufficientBalance as exc:
        print(f"   bob cannot afford a tote: {exc}")
    try:
        token.redeem_tokens("alice", 7)
    except UnknownGift as exc:
        print(f"   no gift 7: {exc}")
    print()

    print("Example 4: Fulfilment")
    print("-" * 80)
    for order in token.view_orders("foundation"):
        print(f"   pending: {order}")
    order_id = token.find_order_id("foundation", "alice", "Tote bag")
    token.finish_order("foundation", order_id)
    print(f"   remaining: {token.view_orders('foundation')}")
    print()

    result = token.verify_conservation()
    print(f"Conservation: {result}")
    print()
    print("=" * 80)


if __name__ == "__main__":
    main()

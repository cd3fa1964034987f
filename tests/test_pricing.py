"""Tests for cart totals."""

import pytest

from models.cart import CartItem
from models.product import Product
from pos.pricing import compute_totals


def _item(price, qty, discount=None, pid="p"):
    return CartItem(
        product=Product(id=pid, name=pid, price=price, discount_price=discount, category="x"),
        quantity=qty,
    )


def test_empty_cart():
    totals = compute_totals(())
    assert (totals.subtotal, totals.discount_total, totals.final_total, totals.item_count) == (0, 0, 0, 0)


def test_mixed_cart_scenario():
    items = [_item(200, 2, discount=180, pid="a"), _item(500, 1, pid="b")]
    totals = compute_totals(items)
    assert totals.subtotal == 900
    assert totals.final_total == 860
    assert totals.discount_total == 40
    assert totals.item_count == 3


def test_zero_discount_counts_as_no_discount():
    totals = compute_totals([_item(300, 2, discount=0)])
    assert totals.final_total == 600
    assert totals.discount_total == 0


@pytest.mark.parametrize(
    "lines",
    [
        [(100, 1, None)],
        [(150, 3, 99)],
        [(1500, 1, 1200), (2000, 4, None), (200, 7, 180)],
        [(1, 10, None), (2, 5, 1)],
    ],
)
def test_totals_invariants(lines):
    items = [_item(price, qty, disc, pid=str(i)) for i, (price, qty, disc) in enumerate(lines)]
    totals = compute_totals(items)
    assert totals.subtotal >= totals.final_total >= 0
    assert totals.discount_total == totals.subtotal - totals.final_total
    assert totals.discount_total >= 0

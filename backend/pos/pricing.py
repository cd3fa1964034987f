# backend/pos/pricing.py
from dataclasses import dataclass
from typing import Iterable

from models.cart import CartItem


# Derived cart totals; never stored, always recomputed from the items
@dataclass(frozen=True)
class Totals:
    subtotal: int  # List-price total
    discount_total: int
    final_total: int  # Amount charged
    item_count: int


def compute_totals(items: Iterable[CartItem]) -> Totals:
    subtotal = 0
    final_total = 0
    item_count = 0

    for item in items:
        subtotal += item.product.price * item.quantity
        final_total += item.product.effective_price * item.quantity
        item_count += item.quantity

    return Totals(
        subtotal=subtotal,
        discount_total=subtotal - final_total,
        final_total=final_total,
        item_count=item_count,
    )

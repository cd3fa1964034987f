# backend/pos/cart.py
"""Cart engine.

Carts are tuples of :class:`CartItem` in add order.  Every operation returns
a new tuple and leaves its input untouched, so a caller can keep the previous
snapshot around (e.g. for totals that were already shown to the customer).
"""
from typing import Tuple

from models.cart import CartItem
from models.product import Product

CartItems = Tuple[CartItem, ...]


def add_item(items: CartItems, product: Product) -> CartItems:
    """Add one unit of ``product``; repeated adds merge into one line."""
    for index, item in enumerate(items):
        if item.product_id == product.id:
            updated = item.with_quantity(item.quantity + 1)
            return items[:index] + (updated,) + items[index + 1:]
    return items + (CartItem(product=product, quantity=1),)


def remove_item(items: CartItems, product_id: str) -> CartItems:
    return tuple(item for item in items if item.product_id != product_id)


def change_quantity(items: CartItems, product_id: str, delta: int) -> CartItems:
    """Shift a line's quantity by ``delta``.

    A result of zero or less leaves the line exactly as it was; the item is
    not removed.  Use :func:`remove_item` to drop a line.
    """
    result = []
    for item in items:
        if item.product_id == product_id:
            new_qty = item.quantity + delta
            if new_qty > 0:
                item = item.with_quantity(new_qty)
        result.append(item)
    return tuple(result)


def clear() -> CartItems:
    return ()

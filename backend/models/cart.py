# backend/models/cart.py
from dataclasses import dataclass, replace

from models.product import Product


# A single cart line: product snapshot taken at add-time plus quantity
@dataclass(frozen=True)
class CartItem:
    product: Product  # Snapshot, later catalog edits do not reach it
    quantity: int = 1

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> int:
        return self.product.effective_price * self.quantity

    @property
    def line_savings(self) -> int:
        return (self.product.price - self.product.effective_price) * self.quantity

    def with_quantity(self, quantity: int) -> "CartItem":
        return replace(self, quantity=quantity)

# backend/models/product.py
from dataclasses import dataclass, replace
from typing import Optional


# Model Product
# Represents a single catalog entry. Values are immutable; catalog edits
# store a new Product under the same id.
@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: int  # List price, integer currency units
    category: str
    stock: int = 0  # Informational only, a sale never decrements it
    cost_price: Optional[int] = None
    discount_price: Optional[int] = None  # Sale price, lower than price
    description: Optional[str] = None
    image_url: Optional[str] = None
    shopee_id: Optional[str] = None  # Marketplace listing id

    @property
    def effective_price(self) -> int:
        # A zero discount counts as "no discount"
        return self.discount_price if self.discount_price else self.price

    def with_changes(self, **changes) -> "Product":
        return replace(self, **changes)

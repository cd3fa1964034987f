from pydantic import BaseModel, Field
from typing import List, Optional

from models.cart import CartItem
from pos.pricing import Totals

# Request schema for adding an item to the cart
class CartAddItem(BaseModel):
    product_id: str

# Request schema for shifting a cart line's quantity
class CartQuantityChange(BaseModel):
    delta: int

# Request schema for attaching (or detaching with null) a member
class CartMemberSelect(BaseModel):
    member_id: Optional[str] = None

# Response schema for a single cart line item
class CartItemOut(BaseModel):
    product_id: str
    name: str
    quantity: int
    price: int
    discount_price: Optional[int] = None
    unit_price: int
    line_total: int
    line_savings: int

    @classmethod
    def from_item(cls, item: CartItem) -> "CartItemOut":
        return cls(
            product_id=item.product_id,
            name=item.product.name,
            quantity=item.quantity,
            price=item.product.price,
            discount_price=item.product.discount_price,
            unit_price=item.product.effective_price,
            line_total=item.line_total,
            line_savings=item.line_savings,
        )

# Response schema for derived cart totals
class TotalsOut(BaseModel):
    subtotal: int = Field(description="List-price total")
    discount_total: int
    final_total: int = Field(description="Amount to charge")
    item_count: int

    @classmethod
    def from_totals(cls, totals: Totals) -> "TotalsOut":
        return cls(
            subtotal=totals.subtotal,
            discount_total=totals.discount_total,
            final_total=totals.final_total,
            item_count=totals.item_count,
        )

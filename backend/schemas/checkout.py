# backend/schemas/checkout.py
from pydantic import BaseModel
from typing import List, Optional

from pos.checkout import CheckoutState
from schemas.cart import CartItemOut, TotalsOut
from schemas.member import MemberOut, TransactionOut


# Full view of one operator's till: cart, totals, member and checkout state
class CartOut(BaseModel):
    items: List[CartItemOut]
    totals: TotalsOut
    member: Optional[MemberOut] = None
    state: CheckoutState


# Result of a completed checkout, consumed by receipt rendering
class ReceiptOut(BaseModel):
    transaction: TransactionOut
    points_earned: int
    member: Optional[MemberOut] = None

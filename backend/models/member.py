# backend/models/member.py
from dataclasses import dataclass, field
import enum
from typing import Tuple

from models.cart import CartItem


# Loyalty tiers, derived from points and never stored
class MemberTier(str, enum.Enum):
    REGULAR = "regular"
    SILVER = "silver"
    GOLD = "gold"
    DIAMOND = "diamond"


# Settled sale. Created once per checkout and never modified afterwards.
@dataclass(frozen=True)
class Transaction:
    id: str  # Invoice number, issued externally or generated locally
    date: str  # Capture-time timestamp
    items: Tuple[CartItem, ...]
    total: int  # Amount charged (after discounts)
    original_total: int  # List-price total
    discount_amount: int


# Loyalty member with purchase history (newest first)
@dataclass(frozen=True)
class Member:
    id: str
    name: str
    phone: str
    points: int = 0
    join_date: str = ""
    history: Tuple[Transaction, ...] = field(default_factory=tuple)

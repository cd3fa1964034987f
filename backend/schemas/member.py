# backend/schemas/member.py
from pydantic import BaseModel, Field
from typing import List

from models.member import Member, MemberTier, Transaction
from pos.loyalty import tier_for
from schemas.cart import CartItemOut


# Input schema for registering a member
class MemberCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)


# Output schema for a settled transaction
class TransactionOut(BaseModel):
    id: str
    date: str
    items: List[CartItemOut]
    total: int
    original_total: int
    discount_amount: int

    @classmethod
    def from_transaction(cls, tx: Transaction) -> "TransactionOut":
        return cls(
            id=tx.id,
            date=tx.date,
            items=[CartItemOut.from_item(item) for item in tx.items],
            total=tx.total,
            original_total=tx.original_total,
            discount_amount=tx.discount_amount,
        )


# Member summary with derived tier
class MemberOut(BaseModel):
    id: str
    name: str
    phone: str
    points: int
    tier: MemberTier
    join_date: str

    @classmethod
    def from_member(cls, member: Member) -> "MemberOut":
        return cls(
            id=member.id, name=member.name, phone=member.phone, points=member.points,
            tier=tier_for(member.points), join_date=member.join_date,
        )


# Member details including purchase history (newest first)
class MemberDetail(MemberOut):
    history: List[TransactionOut]

    @classmethod
    def from_member(cls, member: Member) -> "MemberDetail":
        summary = MemberOut.from_member(member)
        return cls(
            **summary.model_dump(),
            history=[TransactionOut.from_transaction(tx) for tx in member.history],
        )


class MemberList(BaseModel):
    items: List[MemberOut]
    total: int

# backend/pos/loyalty.py
"""Loyalty ledger: point accrual, purchase history and tiers."""
from dataclasses import replace

from models.member import Member, MemberTier, Transaction

POINTS_PER_UNIT = 100  # One point per 100 currency units spent

TIER_THRESHOLDS = (
    (10000, MemberTier.DIAMOND),
    (5000, MemberTier.GOLD),
    (1000, MemberTier.SILVER),
)


def points_earned(final_total: int) -> int:
    return final_total // POINTS_PER_UNIT


def apply_transaction(member: Member, transaction: Transaction) -> Member:
    """Return ``member`` credited with ``transaction``.

    The transaction goes to the front of the history; earlier entries are
    kept as they are.
    """
    return replace(
        member,
        points=member.points + points_earned(transaction.total),
        history=(transaction,) + member.history,
    )


def tier_for(points: int) -> MemberTier:
    for threshold, tier in TIER_THRESHOLDS:
        if points >= threshold:
            return tier
    return MemberTier.REGULAR

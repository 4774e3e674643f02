# storefront/domain/loyalty.py
from decimal import Decimal
from enum import Enum

from storefront.utils.settings import POINTS_PER_CURRENCY_UNIT

SILVER_THRESHOLD = 200
GOLD_THRESHOLD = 500


class Tier(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"


TIER_EMOJI = {
    Tier.BRONZE: "🥉",
    Tier.SILVER: "🥈",
    Tier.GOLD: "🥇",
}


def points_for_spend(total_spent) -> int:
    """floor(total_spent / 100), never negative."""
    spent = Decimal(str(total_spent or 0))
    if spent <= 0:
        return 0
    return int(spent // POINTS_PER_CURRENCY_UNIT)


def tier_for(points: int) -> Tier:
    if points >= GOLD_THRESHOLD:
        return Tier.GOLD
    if points >= SILVER_THRESHOLD:
        return Tier.SILVER
    return Tier.BRONZE


def next_tier_threshold(points: int) -> int | None:
    if points >= GOLD_THRESHOLD:
        return None
    if points >= SILVER_THRESHOLD:
        return GOLD_THRESHOLD
    return SILVER_THRESHOLD


def tier_progress(points: int) -> float:
    threshold = next_tier_threshold(points)
    if threshold is None:
        return 100.0
    return min(100.0, max(points, 0) * 100 / threshold)


def loyalty_summary(points: int) -> dict:
    tier = tier_for(points)
    threshold = next_tier_threshold(points)
    return {
        "points": points,
        "tier": tier,
        "emoji": TIER_EMOJI[tier],
        "next_threshold": threshold,
        "points_to_next": None if threshold is None else threshold - points,
        "progress": tier_progress(points),
    }

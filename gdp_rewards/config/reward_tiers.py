"""
Single source of truth for GDP reward tiers.

Every tier is described by one row of data. The evaluator is the same for all
tiers; only the thresholds, weights and the direct-only threshold differ.
"""

from decimal import Decimal
from enum import Enum
from typing import NamedTuple


class RewardTier(str, Enum):
    """GDP reward tiers."""

    TIER_130 = "130"
    TIER_150 = "150"
    TIER_200 = "200"
    TIER_300 = "300"
    TIER_500 = "500"
    TIER_1000 = "1000"

    @property
    def flag_name(self) -> str:
        """Name of the denormalized claim flag on User."""
        return f"claimed_{self.value}"


class TierDefinition(NamedTuple):
    """Static configuration of a reward tier."""

    tier: RewardTier
    percent: int  # Headline percentage (130, 150, ...)
    thresholds: tuple[int, ...]  # Qualifying count required per generation, gen 1 first
    weights: tuple[float, ...]  # Progress weight per generation, sums to 100
    direct_only_threshold: int  # Direct children alone that unlock the tier
    payout_rate: Decimal  # Share of the GDP price credited on claim
    display_name: str


REWARD_TIERS: dict[RewardTier, TierDefinition] = {
    RewardTier.TIER_130: TierDefinition(
        tier=RewardTier.TIER_130,
        percent=130,
        thresholds=(2,),
        weights=(100.0,),
        direct_only_threshold=2,
        payout_rate=Decimal("0.3"),
        display_name="130% GDP Reward",
    ),
    RewardTier.TIER_150: TierDefinition(
        tier=RewardTier.TIER_150,
        percent=150,
        thresholds=(3, 4),
        weights=(50.0, 50.0),
        direct_only_threshold=4,
        payout_rate=Decimal("0.5"),
        display_name="150% GDP Reward",
    ),
    RewardTier.TIER_200: TierDefinition(
        tier=RewardTier.TIER_200,
        percent=200,
        thresholds=(4, 4, 8),
        weights=(33.33, 33.33, 33.34),
        direct_only_threshold=6,
        payout_rate=Decimal("1.0"),
        display_name="200% GDP Reward",
    ),
    RewardTier.TIER_300: TierDefinition(
        tier=RewardTier.TIER_300,
        percent=300,
        thresholds=(6, 4, 8, 16),
        weights=(25.0, 25.0, 25.0, 25.0),
        direct_only_threshold=8,
        payout_rate=Decimal("2.0"),
        display_name="300% GDP Reward",
    ),
    RewardTier.TIER_500: TierDefinition(
        tier=RewardTier.TIER_500,
        percent=500,
        thresholds=(8, 4, 8, 16, 32),
        weights=(20.0, 20.0, 20.0, 20.0, 20.0),
        direct_only_threshold=12,
        payout_rate=Decimal("4.0"),
        display_name="500% GDP Reward",
    ),
    RewardTier.TIER_1000: TierDefinition(
        tier=RewardTier.TIER_1000,
        percent=1000,
        thresholds=(16, 4, 8, 16, 32, 64),
        weights=(16.67, 16.67, 16.67, 16.67, 16.67, 16.65),
        direct_only_threshold=20,
        payout_rate=Decimal("9.0"),
        display_name="1000% GDP Reward",
    ),
}


# Ascending order, used for overviews and flag listings
REWARD_TIER_ORDER = [
    RewardTier.TIER_130,
    RewardTier.TIER_150,
    RewardTier.TIER_200,
    RewardTier.TIER_300,
    RewardTier.TIER_500,
    RewardTier.TIER_1000,
]

# Deepest generation any tier looks at
MAX_GENERATION = max(len(config.thresholds) for config in REWARD_TIERS.values())


def get_tier_definition(tier: str | RewardTier) -> TierDefinition | None:
    """
    Get tier definition by id.

    Args:
        tier: Tier id ("130", "150", ...) or enum

    Returns:
        Tier definition or None if not found
    """
    if not isinstance(tier, RewardTier):
        try:
            tier = RewardTier(str(tier))
        except ValueError:
            return None
    return REWARD_TIERS.get(tier)


def get_tier_by_percent(percent: int) -> TierDefinition | None:
    """
    Get tier definition by headline percentage.

    Args:
        percent: 130, 150, 200, 300, 500 or 1000

    Returns:
        Tier definition or None if not found
    """
    for config in REWARD_TIERS.values():
        if config.percent == percent:
            return config
    return None

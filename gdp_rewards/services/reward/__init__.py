"""
Reward services package.

Contains the GDP reward engine:
- qualification_counter: Counts qualifying descendants per generation
- tier_evaluator: Progress and eligibility of a tier
- network_snapshot: Reads a user's downstream network
- eligibility_service: Evaluates stored users, builds the overview
- claim_service: Records at most one claim per (user, tier)
"""

from gdp_rewards.services.reward.claim_service import RewardClaimService
from gdp_rewards.services.reward.eligibility_service import (
    RewardEligibilityService,
    calculate_reward_amount,
    claim_button_label,
)
from gdp_rewards.services.reward.network_snapshot import NetworkSnapshotProvider
from gdp_rewards.services.reward.qualification_counter import count_qualifying, flatten_tree
from gdp_rewards.services.reward.tier_evaluator import evaluate_all, evaluate_tier
from gdp_rewards.services.reward.types import (
    ClaimState,
    MissingRequirement,
    NetworkNode,
    NetworkSnapshot,
    QualifyingCounts,
    RewardOverview,
    TierEvaluation,
    TierStatus,
)


__all__ = [
    # Pure evaluation
    "count_qualifying",
    "flatten_tree",
    "evaluate_tier",
    "evaluate_all",
    "calculate_reward_amount",
    "claim_button_label",
    # Services
    "NetworkSnapshotProvider",
    "RewardEligibilityService",
    "RewardClaimService",
    # Types
    "ClaimState",
    "MissingRequirement",
    "NetworkNode",
    "NetworkSnapshot",
    "QualifyingCounts",
    "RewardOverview",
    "TierEvaluation",
    "TierStatus",
]

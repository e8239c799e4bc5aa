"""
Services.

Business logic layer.
"""

from gdp_rewards.services.base_service import BaseService, log_operation
from gdp_rewards.services.reward import RewardClaimService, RewardEligibilityService


__all__ = [
    "BaseService",
    "log_operation",
    "RewardClaimService",
    "RewardEligibilityService",
]

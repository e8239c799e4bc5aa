"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from gdp_rewards.models.base import Base

# Core Models
from gdp_rewards.models.user import User

# Reward Models
from gdp_rewards.models.reward_claim import RewardClaim
from gdp_rewards.models.reward_ledger import RewardLedgerEntry
from gdp_rewards.models.reward_settings import RewardSettings


__all__ = [
    "Base",
    "User",
    "RewardClaim",
    "RewardLedgerEntry",
    "RewardSettings",
]

"""
Repositories package.

Data access layer for reward engine models.
"""

from gdp_rewards.repositories.network_repository import DescendantRow, NetworkRepository
from gdp_rewards.repositories.reward_claim_repository import RewardClaimRepository
from gdp_rewards.repositories.reward_ledger_repository import RewardLedgerRepository
from gdp_rewards.repositories.reward_settings_repository import RewardSettingsRepository
from gdp_rewards.repositories.user_repository import UserRepository

__all__ = [
    "DescendantRow",
    "NetworkRepository",
    "RewardClaimRepository",
    "RewardLedgerRepository",
    "RewardSettingsRepository",
    "UserRepository",
]

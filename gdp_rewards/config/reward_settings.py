"""
Reward settings snapshot.

Read-only view of the admin-owned reward settings, passed explicitly into the
code that needs it instead of being held as shared mutable state.
"""

from dataclasses import dataclass
from decimal import Decimal

from gdp_rewards.utils.exceptions import InvalidInputError


DEFAULT_INVESTMENT_TERM_DAYS = 30


@dataclass(frozen=True)
class RewardSettingsSnapshot:
    """
    Reward settings at the time they were read.

    Attributes:
        percentage: Base reward percentage (0-100)
        investment_percentage: Investment reward percentage (0-100)
        investment_term: Investment term in days
        gdp_reward_percentage: GDP purchase reward percentage (0-100)
    """

    percentage: Decimal = Decimal("0")
    investment_percentage: Decimal = Decimal("0")
    investment_term: int = DEFAULT_INVESTMENT_TERM_DAYS
    gdp_reward_percentage: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        for name in ("percentage", "investment_percentage", "gdp_reward_percentage"):
            value = getattr(self, name)
            if not Decimal("0") <= value <= Decimal("100"):
                raise InvalidInputError(
                    f"{name} must be between 0 and 100, got {value}"
                )
        if self.investment_term < 0:
            raise InvalidInputError(
                f"investment_term must not be negative, got {self.investment_term}"
            )

    @property
    def gdp_reward_rate(self) -> Decimal:
        """GDP reward percentage as a fraction."""
        return self.gdp_reward_percentage / 100

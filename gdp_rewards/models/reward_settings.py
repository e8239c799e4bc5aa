"""
RewardSettings model.

Admin-owned reward percentages and investment term. The engine only reads it.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from gdp_rewards.models.base import Base
from gdp_rewards.models.types import PercentType


class RewardSettings(Base):
    """Single-row reward settings table."""

    __tablename__ = "reward_settings"
    __table_args__ = (
        CheckConstraint(
            'percentage >= 0 AND percentage <= 100',
            name='check_reward_settings_percentage_range'
        ),
        CheckConstraint(
            'investment_percentage >= 0 AND investment_percentage <= 100',
            name='check_reward_settings_investment_percentage_range'
        ),
        CheckConstraint(
            'gdp_reward_percentage >= 0 AND gdp_reward_percentage <= 100',
            name='check_reward_settings_gdp_reward_percentage_range'
        ),
        CheckConstraint(
            'investment_term >= 0',
            name='check_reward_settings_investment_term_non_negative'
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    # Base reward percentage (0-100)
    percentage: Mapped[Decimal] = mapped_column(
        PercentType, default=Decimal("0"), nullable=False
    )
    # Investment reward percentage (0-100)
    investment_percentage: Mapped[Decimal] = mapped_column(
        PercentType, default=Decimal("0"), nullable=False
    )
    # Investment term in days
    investment_term: Mapped[int] = mapped_column(
        Integer, default=30, nullable=False
    )
    # GDP purchase reward percentage (0-100)
    gdp_reward_percentage: Mapped[Decimal] = mapped_column(
        PercentType, default=Decimal("0"), nullable=False
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<RewardSettings(percentage={self.percentage}, "
            f"investment_percentage={self.investment_percentage}, "
            f"investment_term={self.investment_term}, "
            f"gdp_reward_percentage={self.gdp_reward_percentage})>"
        )

"""
RewardClaim model.

One row per (user, tier) claim. The presence of a row is the source of truth
for the claimed state; it is never updated or deleted by the engine.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gdp_rewards.models.base import Base
from gdp_rewards.models.types import MoneyType

if TYPE_CHECKING:
    from gdp_rewards.models.user import User


class RewardClaim(Base):
    """
    RewardClaim entity.

    Attributes:
        id: Primary key
        user_id: Claiming user
        tier: Tier id ("130", "150", ...)
        amount: Amount credited to the user's balance
        claimed_at: When the claim was settled
    """

    __tablename__ = "reward_claims"
    __table_args__ = (
        UniqueConstraint("user_id", "tier", name="uq_reward_claims_user_tier"),
        Index("idx_reward_claims_user_claimed_at", "user_id", "claimed_at"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    tier: Mapped[str] = mapped_column(String(10), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        MoneyType,
        nullable=False,
        comment="GDP price multiplied by the tier payout rate",
    )
    claimed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="reward_claims")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<RewardClaim(id={self.id}, user_id={self.user_id}, "
            f"tier={self.tier}, amount={self.amount})>"
        )

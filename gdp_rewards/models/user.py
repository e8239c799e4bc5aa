"""
User model.

Represents a member of the referral network.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gdp_rewards.config.reward_tiers import RewardTier
from gdp_rewards.models.base import Base
from gdp_rewards.models.types import MoneyType

if TYPE_CHECKING:
    from gdp_rewards.models.reward_claim import RewardClaim


class User(Base):
    """User model - referral network members."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            'balance >= 0', name='check_user_balance_non_negative'
        ),
        CheckConstraint(
            'gdp_price IS NULL OR gdp_price > 0',
            name='check_user_gdp_price_positive'
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    username: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )
    role: Mapped[str] = mapped_column(
        String(20), default="member", nullable=False
    )

    # Referral tree
    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # GDP price fixed at enrollment; reference price for the member's own network
    gdp_price: Mapped[Decimal | None] = mapped_column(
        MoneyType, nullable=True, index=True
    )

    # Reward ledger balance
    balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Denormalized claim cache - written only together with a RewardClaim row
    claimed_130: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    claimed_150: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    claimed_200: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    claimed_300: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    claimed_500: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    claimed_1000: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reward_claimed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    parent: Mapped["User | None"] = relationship(
        "User", remote_side=[id], back_populates="children"
    )
    children: Mapped[list["User"]] = relationship(
        "User", back_populates="parent"
    )
    reward_claims: Mapped[list["RewardClaim"]] = relationship(
        "RewardClaim",
        back_populates="user",
        order_by="RewardClaim.claimed_at",
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(id={self.id}, username={self.username}, "
            f"parent_id={self.parent_id}, gdp_price={self.gdp_price})>"
        )

    def is_tier_claimed(self, tier: RewardTier) -> bool:
        """Read the cached claim flag for tier."""
        return bool(getattr(self, tier.flag_name))

    def mark_tier_claimed(self, tier: RewardTier) -> None:
        """Set the cached claim flags for tier."""
        setattr(self, tier.flag_name, True)
        self.reward_claimed = True

    @property
    def claimed_tiers(self) -> list[RewardTier]:
        """Tiers flagged as claimed on this user."""
        return [tier for tier in RewardTier if self.is_tier_claimed(tier)]

"""
RewardLedgerEntry model.

Credit written to a user's reward ledger by a successful claim.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from gdp_rewards.models.base import Base
from gdp_rewards.models.types import MoneyType


class RewardLedgerEntry(Base):
    """Reward ledger credit, unique per (user, reason)."""

    __tablename__ = "reward_ledger"
    __table_args__ = (
        UniqueConstraint("user_id", "reason", name="uq_reward_ledger_user_reason"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    claim_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("reward_claims.id", ondelete="SET NULL"),
        nullable=True,
    )
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    # Tier id for GDP rewards
    reason: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<RewardLedgerEntry(id={self.id}, user_id={self.user_id}, "
            f"amount={self.amount}, reason={self.reason})>"
        )

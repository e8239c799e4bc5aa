"""
Reward ledger repository.

Data access layer for RewardLedgerEntry model.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from gdp_rewards.models.reward_ledger import RewardLedgerEntry
from gdp_rewards.models.user import User
from gdp_rewards.repositories.base import BaseRepository


class RewardLedgerRepository(BaseRepository[RewardLedgerEntry]):
    """Reward ledger repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize reward ledger repository."""
        super().__init__(RewardLedgerEntry, session)

    async def credit(
        self,
        user_id: int,
        amount: Decimal,
        reason: str,
        claim_id: int | None = None,
    ) -> RewardLedgerEntry:
        """
        Credit a user's reward ledger.

        Writes the ledger entry and increments the user's balance in the
        caller's transaction. The (user_id, reason) unique constraint rejects
        a second credit for the same reason.

        Args:
            user_id: User ID
            amount: Amount to credit
            reason: Credit reason (tier id for GDP rewards)
            claim_id: Claim record that triggered the credit

        Returns:
            Created ledger entry
        """
        entry = await self.create(
            user_id=user_id,
            amount=amount,
            reason=reason,
            claim_id=claim_id,
        )

        # Atomic in-database increment
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(balance=User.balance + amount)
        )
        await self.session.execute(stmt)

        logger.info(
            "Reward ledger credited",
            extra={
                "user_id": user_id,
                "amount": str(amount),
                "reason": reason,
                "claim_id": claim_id,
            },
        )
        return entry

    async def get_total_credited(self, user_id: int) -> Decimal:
        """
        Get the total amount credited to a user.

        Args:
            user_id: User ID

        Returns:
            Sum of ledger entries
        """
        stmt = select(
            func.coalesce(func.sum(RewardLedgerEntry.amount), Decimal("0"))
        ).where(RewardLedgerEntry.user_id == user_id)
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))

"""
Reward claim repository.

Data access layer for RewardClaim model. Claims are keyed by (user_id, tier)
and written through an atomic create-if-absent.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from gdp_rewards.models.reward_claim import RewardClaim
from gdp_rewards.repositories.base import BaseRepository


_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class RewardClaimRepository(BaseRepository[RewardClaim]):
    """Reward claim repository with create-if-absent semantics."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize reward claim repository."""
        super().__init__(RewardClaim, session)

    async def get(self, user_id: int, tier: str) -> RewardClaim | None:
        """
        Get claim record for (user, tier).

        Args:
            user_id: User ID
            tier: Tier id

        Returns:
            Claim record or None
        """
        return await self.get_by(user_id=user_id, tier=tier)

    async def create_if_absent(
        self,
        user_id: int,
        tier: str,
        amount: Decimal,
        claimed_at: datetime | None = None,
    ) -> RewardClaim | None:
        """
        Atomically create a claim record unless one exists for the key.

        Uses INSERT ... ON CONFLICT DO NOTHING on the (user_id, tier) unique
        constraint, so two concurrent writers can never both succeed.

        Args:
            user_id: User ID
            tier: Tier id
            amount: Credited amount
            claimed_at: Claim timestamp (defaults to now)

        Returns:
            Newly created record, or None if the key already existed

        Raises:
            NotImplementedError: Dialect without ON CONFLICT support
        """
        values = {
            "user_id": user_id,
            "tier": tier,
            "amount": amount,
            "claimed_at": claimed_at or datetime.now(UTC),
        }

        insert = _UPSERT_INSERTS.get(self.dialect_name)
        if insert is None:
            raise NotImplementedError(
                f"Create-if-absent is not supported on dialect {self.dialect_name!r}"
            )

        stmt = (
            insert(RewardClaim)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["user_id", "tier"])
            .returning(RewardClaim.id)
        )
        result = await self.session.execute(stmt)
        claim_id = result.scalar_one_or_none()
        if claim_id is None:
            return None

        return await self.get_by_id(claim_id)

    async def list_for_user(self, user_id: int) -> list[RewardClaim]:
        """
        Get a user's claims in claim order.

        Args:
            user_id: User ID

        Returns:
            Claims ordered by claimed_at, then id
        """
        stmt = (
            select(RewardClaim)
            .where(RewardClaim.user_id == user_id)
            .order_by(RewardClaim.claimed_at.asc(), RewardClaim.id.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

"""
User repository.

Data access layer for User model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gdp_rewards.models.user import User
from gdp_rewards.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_for_update(self, user_id: int) -> User | None:
        """
        Get user with a row lock (SELECT FOR UPDATE).

        Dialects without row locks (SQLite) ignore the clause and rely on
        their database-level write lock.

        Args:
            user_id: User ID

        Returns:
            User or None
        """
        stmt = (
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

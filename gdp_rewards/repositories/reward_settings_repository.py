"""
Reward settings repository.

Read-only access to the admin-owned reward settings row.
"""

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gdp_rewards.config.reward_settings import RewardSettingsSnapshot
from gdp_rewards.models.reward_settings import RewardSettings
from gdp_rewards.repositories.base import BaseRepository
from gdp_rewards.utils.exceptions import InvalidInputError


class RewardSettingsRepository(BaseRepository[RewardSettings]):
    """Reward settings repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize reward settings repository."""
        super().__init__(RewardSettings, session)

    async def get_snapshot(self) -> RewardSettingsSnapshot:
        """
        Read reward settings as an immutable snapshot.

        Falls back to defaults when the settings row has not been created yet,
        or when it holds values outside the allowed ranges (rows written before
        the table carried its check constraints).

        Returns:
            Reward settings snapshot
        """
        stmt = select(RewardSettings).order_by(RewardSettings.id.asc()).limit(1)
        result = await self.session.execute(stmt)
        row = result.scalar_one_or_none()

        if row is None:
            logger.debug("Reward settings not configured, using defaults")
            return RewardSettingsSnapshot()

        try:
            return RewardSettingsSnapshot(
                percentage=row.percentage,
                investment_percentage=row.investment_percentage,
                investment_term=row.investment_term,
                gdp_reward_percentage=row.gdp_reward_percentage,
            )
        except InvalidInputError as e:
            logger.warning(
                "Invalid reward settings row, using defaults",
                extra={"settings_id": row.id, "error": str(e)},
            )
            return RewardSettingsSnapshot()

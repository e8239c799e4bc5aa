"""
Network snapshot provider.

Turns the repository's flat descendant rows into the snapshot consumed by the
qualification counter.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from gdp_rewards.config.reward_tiers import MAX_GENERATION
from gdp_rewards.repositories.network_repository import NetworkRepository
from gdp_rewards.services.reward.types import NetworkNode, NetworkSnapshot


class NetworkSnapshotProvider:
    """Reads a user's downstream network as a point-in-time snapshot."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize snapshot provider."""
        self.network_repo = NetworkRepository(session)

    async def get_descendants(
        self, user_id: int, max_depth: int = MAX_GENERATION
    ) -> NetworkSnapshot:
        """
        Get descendants of a user down to max_depth generations.

        Args:
            user_id: Evaluated user ID
            max_depth: Deepest generation to read

        Returns:
            Network snapshot
        """
        rows = await self.network_repo.fetch_descendants(user_id, max_depth)
        return NetworkSnapshot(
            root_user_id=user_id,
            nodes=tuple(
                NetworkNode(
                    user_id=row.user_id,
                    generation=row.generation,
                    value=row.gdp_price,
                    parent_id=row.parent_id,
                )
                for row in rows
            ),
        )

"""
Network repository.

Reads a user's downstream referral network in a single statement.
"""

from decimal import Decimal
from typing import NamedTuple

from loguru import logger
from sqlalchemy import Integer, text
from sqlalchemy.ext.asyncio import AsyncSession

from gdp_rewards.models.types import MoneyType


class DescendantRow(NamedTuple):
    """Flat descendant row returned by the recursive query."""

    user_id: int
    parent_id: int
    gdp_price: Decimal | None
    generation: int


_DESCENDANTS_QUERY = text("""
    WITH RECURSIVE network AS (
        -- Base case: direct children
        SELECT
            u.id,
            u.parent_id,
            u.gdp_price,
            1 AS generation
        FROM users u
        WHERE u.parent_id = :user_id

        UNION ALL

        -- Recursive case: children of the previous generation
        SELECT
            u.id,
            u.parent_id,
            u.gdp_price,
            n.generation + 1 AS generation
        FROM users u
        INNER JOIN network n ON u.parent_id = n.id
        WHERE n.generation < :max_depth
    )
    SELECT id, parent_id, gdp_price, generation
    FROM network
    ORDER BY generation ASC, id ASC
""").columns(
    id=Integer,
    parent_id=Integer,
    gdp_price=MoneyType,
    generation=Integer,
)


class NetworkRepository:
    """Downstream network queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize network repository."""
        self.session = session

    async def fetch_descendants(
        self, user_id: int, max_depth: int
    ) -> list[DescendantRow]:
        """
        Get descendants of a user down to max_depth generations.

        Uses a recursive CTE so the whole tree is read at one point in time.

        Args:
            user_id: Root user ID
            max_depth: Deepest generation to read (1 = direct children)

        Returns:
            Descendant rows ordered by generation
        """
        if max_depth < 1:
            return []

        result = await self.session.execute(
            _DESCENDANTS_QUERY, {"user_id": user_id, "max_depth": max_depth}
        )
        rows = [
            DescendantRow(
                user_id=row.id,
                parent_id=row.parent_id,
                gdp_price=row.gdp_price,
                generation=row.generation,
            )
            for row in result.all()
        ]

        logger.debug(
            "Referral network retrieved",
            extra={
                "user_id": user_id,
                "max_depth": max_depth,
                "descendants": len(rows),
            },
        )
        return rows

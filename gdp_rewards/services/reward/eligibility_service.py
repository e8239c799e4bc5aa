"""
Reward eligibility service.

Glues the snapshot provider, the qualification counter and the tier evaluator
together for a stored user, and builds the overview read model.
"""

from collections.abc import Mapping
from decimal import ROUND_DOWN, Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from gdp_rewards.config.reward_settings import RewardSettingsSnapshot
from gdp_rewards.config.reward_tiers import (
    REWARD_TIER_ORDER,
    REWARD_TIERS,
    RewardTier,
    TierDefinition,
)
from gdp_rewards.config.settings import settings
from gdp_rewards.models.user import User
from gdp_rewards.repositories.reward_claim_repository import RewardClaimRepository
from gdp_rewards.repositories.reward_settings_repository import RewardSettingsRepository
from gdp_rewards.repositories.user_repository import UserRepository
from gdp_rewards.services.base_service import BaseService, log_operation
from gdp_rewards.services.reward.network_snapshot import NetworkSnapshotProvider
from gdp_rewards.services.reward.qualification_counter import count_qualifying
from gdp_rewards.services.reward.tier_evaluator import evaluate_all, evaluate_tier
from gdp_rewards.services.reward.types import (
    ClaimState,
    QualifyingCounts,
    RewardOverview,
    TierEvaluation,
    TierStatus,
)
from gdp_rewards.utils.exceptions import InvalidInputError, UserNotFoundError


AMOUNT_QUANT = Decimal("0.00000001")


def calculate_reward_amount(
    gdp_price: Decimal | None, definition: TierDefinition
) -> Decimal:
    """
    Calculate the amount credited for a tier.

    Formula: gdp_price * payout_rate, truncated to 8 decimal places

    Args:
        gdp_price: Claiming user's GDP price (the qualifying investment basis)
        definition: Tier definition

    Returns:
        Reward amount, 0 for users without a GDP price

    Example:
        >>> calculate_reward_amount(Decimal("100"), REWARD_TIERS[RewardTier.TIER_130])
        Decimal('30.00000000')
    """
    if gdp_price is None or gdp_price <= 0:
        return Decimal("0")
    return (gdp_price * definition.payout_rate).quantize(AMOUNT_QUANT, rounding=ROUND_DOWN)


def claim_button_label(
    evaluation: TierEvaluation, tier_claimed: bool, any_claimed: bool
) -> str | None:
    """
    Label of the claim button for a tier.

    The button only appears at 100% progress. "unclaim" is shown when another
    tier has been claimed; it is a label only and has no transition behind it.

    Args:
        evaluation: Tier evaluation
        tier_claimed: Whether this tier is claimed
        any_claimed: Whether any tier is claimed

    Returns:
        "claimed", "unclaim", "claim" or None when no button is shown
    """
    if evaluation.progress_percent < 100.0:
        return None
    if tier_claimed:
        return "claimed"
    if any_claimed:
        return "unclaim"
    return "claim"


class RewardEligibilityService(BaseService):
    """Evaluates stored users against the reward tiers."""

    def __init__(
        self,
        session: AsyncSession,
        max_generation: int | None = None,
        require_qualifying_lineage: bool | None = None,
        definitions: Mapping[RewardTier, TierDefinition] | None = None,
    ) -> None:
        """
        Initialize eligibility service.

        Args:
            session: Async database session
            max_generation: Deepest generation counted (defaults to settings)
            require_qualifying_lineage: Lineage rule (defaults to settings)
            definitions: Tier table (defaults to REWARD_TIERS)
        """
        super().__init__(session)
        self.max_generation = (
            max_generation
            if max_generation is not None
            else settings.reward_max_generation
        )
        self.require_qualifying_lineage = (
            require_qualifying_lineage
            if require_qualifying_lineage is not None
            else settings.reward_require_qualifying_lineage
        )
        self.definitions = definitions if definitions is not None else REWARD_TIERS
        self.user_repo = UserRepository(session)
        self.claim_repo = RewardClaimRepository(session)
        self.settings_repo = RewardSettingsRepository(session)
        self.snapshot_provider = NetworkSnapshotProvider(session)

    def get_definition(self, tier: RewardTier) -> TierDefinition:
        """Tier definition from the configured table."""
        definition = self.definitions.get(tier)
        if definition is None:
            raise InvalidInputError(f"Unknown reward tier: {tier}")
        return definition

    async def get_counts(self, user: User) -> QualifyingCounts:
        """
        Count the user's qualifying descendants.

        Args:
            user: Evaluated user

        Returns:
            Counts per generation; all zero when the user has no GDP price
        """
        if user.gdp_price is None:
            return QualifyingCounts(counts=(0,) * self.max_generation)

        snapshot = await self.snapshot_provider.get_descendants(
            user.id, max_depth=self.max_generation
        )
        counts = count_qualifying(
            snapshot,
            user.gdp_price,
            max_generation=self.max_generation,
            require_qualifying_lineage=self.require_qualifying_lineage,
        )

        self.logger.debug(
            "Qualifying descendants counted",
            extra={
                "user_id": user.id,
                "descendants": len(snapshot.nodes),
                "counts": counts.as_dict(),
            },
        )
        return counts

    async def evaluate_user_tier(
        self, user: User, tier: RewardTier
    ) -> TierEvaluation:
        """
        Evaluate one tier for a user from a fresh snapshot.

        Args:
            user: Evaluated user
            tier: Reward tier

        Returns:
            Tier evaluation
        """
        definition = self.get_definition(tier)
        counts = await self.get_counts(user)
        return evaluate_tier(counts, definition)

    @log_operation
    async def get_overview(self, user_id: int) -> RewardOverview:
        """
        Build the reward overview for a user.

        Claim state comes from the claim records, not from the cached flags.

        Args:
            user_id: User ID

        Returns:
            Reward overview

        Raises:
            UserNotFoundError: Unknown user
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        counts = await self.get_counts(user)
        evaluations = evaluate_all(counts, self.definitions)
        claimed_tiers = {
            claim.tier for claim in await self.claim_repo.list_for_user(user_id)
        }
        any_claimed = bool(claimed_tiers)

        tiers: dict[RewardTier, TierStatus] = {}
        for tier in REWARD_TIER_ORDER:
            evaluation = evaluations.get(tier)
            if evaluation is None:
                continue
            tier_claimed = tier.value in claimed_tiers
            tiers[tier] = TierStatus(
                evaluation=evaluation,
                state=ClaimState.CLAIMED if tier_claimed else ClaimState.UNCLAIMED,
                button_label=claim_button_label(evaluation, tier_claimed, any_claimed),
                reward_amount=calculate_reward_amount(
                    user.gdp_price, self.definitions[tier]
                ),
            )

        reward_settings: RewardSettingsSnapshot = await self.settings_repo.get_snapshot()

        return RewardOverview(
            user_id=user_id,
            reference_price=user.gdp_price,
            counts=counts,
            tiers=tiers,
            settings=reward_settings,
        )

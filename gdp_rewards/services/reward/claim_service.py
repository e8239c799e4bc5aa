"""
Reward claim service.

Records at most one claim per (user, tier). The claim record, the cached user
flags and the ledger credit are written in one transaction; the unique
(user_id, tier) key decides concurrent races.
"""

from decimal import Decimal
from typing import NoReturn

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gdp_rewards.config.reward_tiers import RewardTier, TierDefinition, get_tier_definition
from gdp_rewards.models.reward_claim import RewardClaim
from gdp_rewards.models.user import User
from gdp_rewards.repositories.reward_claim_repository import RewardClaimRepository
from gdp_rewards.repositories.reward_ledger_repository import RewardLedgerRepository
from gdp_rewards.repositories.user_repository import UserRepository
from gdp_rewards.services.base_service import BaseService, log_operation
from gdp_rewards.services.reward.eligibility_service import (
    RewardEligibilityService,
    calculate_reward_amount,
)
from gdp_rewards.services.reward.types import ClaimState
from gdp_rewards.utils.exceptions import (
    AlreadyClaimedError,
    InvalidInputError,
    NotEligibleError,
    RewardEngineError,
    StorageUnavailableError,
    UserNotFoundError,
    is_transient_storage_error,
)


class RewardClaimService(BaseService):
    """Claims reward tiers for users."""

    def __init__(
        self,
        session: AsyncSession,
        eligibility_service: RewardEligibilityService | None = None,
    ) -> None:
        """
        Initialize claim service.

        Args:
            session: Async database session
            eligibility_service: Evaluator used for the claim-time check
        """
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.claim_repo = RewardClaimRepository(session)
        self.ledger_repo = RewardLedgerRepository(session)
        self.eligibility_service = eligibility_service or RewardEligibilityService(session)

    @staticmethod
    def _resolve_tier(tier: str | RewardTier) -> TierDefinition:
        definition = get_tier_definition(tier)
        if definition is None:
            raise InvalidInputError(f"Unknown reward tier: {tier}")
        return definition

    @log_operation
    async def claim(self, user_id: int, tier: str | RewardTier) -> RewardClaim:
        """
        Claim a reward tier.

        Eligibility is re-evaluated against a fresh snapshot; a stale
        "eligible" seen by the caller is not trusted. Repeating a successful
        claim raises AlreadyClaimedError and changes nothing.

        Rejections found before anything is written (unknown user, existing
        claim, not eligible) leave the session untouched. A failure after the
        write phase began (lost race, storage error) rolls the session back,
        which expires every object loaded in it; re-read them, or keep their
        ids, before further use.

        Args:
            user_id: Claiming user ID
            tier: Tier id ("130", "150", ...) or enum

        Returns:
            Created claim record

        Raises:
            InvalidInputError: Unknown tier
            UserNotFoundError: Unknown user
            NotEligibleError: Progress below 100%
            AlreadyClaimedError: Tier already claimed (including lost races)
            StorageUnavailableError: Transient database failure, nothing recorded
        """
        definition = self._resolve_tier(tier)

        try:
            user, amount = await self._check_claimable(user_id, definition)
        except SQLAlchemyError as e:
            await self.safe_rollback()
            self._raise_storage_error(e, user_id, definition)

        try:
            claim = await self._record_claim(user, definition, amount)
            await self.commit()
        except RewardEngineError:
            await self.safe_rollback()
            raise
        except SQLAlchemyError as e:
            await self.safe_rollback()
            self._raise_storage_error(e, user_id, definition)

        self.logger.info(
            "Reward tier claimed",
            extra={
                "user_id": user_id,
                "tier": definition.tier.value,
                "amount": str(claim.amount),
                "claim_id": claim.id,
            },
        )
        return claim

    async def _check_claimable(
        self, user_id: int, definition: TierDefinition
    ) -> tuple[User, Decimal]:
        tier_id = definition.tier.value

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        if await self.claim_repo.get(user_id, tier_id) is not None:
            raise AlreadyClaimedError(user_id, tier_id)

        evaluation = await self.eligibility_service.evaluate_user_tier(
            user, definition.tier
        )
        if not evaluation.eligible:
            raise NotEligibleError(user_id, tier_id, evaluation)

        return user, calculate_reward_amount(user.gdp_price, definition)

    async def _record_claim(
        self, user: User, definition: TierDefinition, amount: Decimal
    ) -> RewardClaim:
        tier_id = definition.tier.value

        claim = await self.claim_repo.create_if_absent(user.id, tier_id, amount)
        if claim is None:
            # Lost the race to a concurrent claim
            raise AlreadyClaimedError(user.id, tier_id)

        user.mark_tier_claimed(definition.tier)
        await self.ledger_repo.credit(
            user.id, amount, reason=tier_id, claim_id=claim.id
        )
        await self.session.flush()
        return claim

    def _raise_storage_error(
        self, error: SQLAlchemyError, user_id: int, definition: TierDefinition
    ) -> NoReturn:
        if not is_transient_storage_error(error):
            raise error
        self.logger.warning(
            "Claim store unavailable",
            extra={
                "user_id": user_id,
                "tier": definition.tier.value,
                "error": str(error),
            },
        )
        raise StorageUnavailableError(
            f"Claim store unavailable for user {user_id}, tier {definition.tier.value}"
        ) from error

    async def get_claims(self, user_id: int) -> list[RewardClaim]:
        """
        Get a user's claim records.

        Args:
            user_id: User ID

        Returns:
            Claims in claim order
        """
        return await self.claim_repo.list_for_user(user_id)

    async def claim_state(
        self, user_id: int, tier: str | RewardTier
    ) -> ClaimState:
        """
        Get claim state of (user, tier) from the claim records.

        Args:
            user_id: User ID
            tier: Tier id or enum

        Returns:
            CLAIMED if a claim record exists, else UNCLAIMED
        """
        definition = self._resolve_tier(tier)
        claim = await self.claim_repo.get(user_id, definition.tier.value)
        return ClaimState.CLAIMED if claim is not None else ClaimState.UNCLAIMED

    @log_operation
    async def sync_claim_flags(self, user_id: int) -> User:
        """
        Rebuild the cached claim flags on User from the claim records.

        Args:
            user_id: User ID

        Returns:
            Updated user

        Raises:
            UserNotFoundError: Unknown user
        """
        user = await self.user_repo.get_for_update(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        claimed = {claim.tier for claim in await self.claim_repo.list_for_user(user_id)}
        for tier in RewardTier:
            setattr(user, tier.flag_name, tier.value in claimed)
        user.reward_claimed = bool(claimed)

        await self.commit()

        self.logger.info(
            "Claim flags synced",
            extra={"user_id": user_id, "claimed_tiers": sorted(claimed)},
        )
        return user

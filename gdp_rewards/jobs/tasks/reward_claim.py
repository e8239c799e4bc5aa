"""
Reward claim settlement task.

Settles a tier claim in the background. Only transient storage failures are
retried; a retry that finds the claim already recorded counts as settled, so
a claim is never credited twice however often the message is delivered.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

import dramatiq
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from gdp_rewards.config.settings import settings
from gdp_rewards.jobs.async_runner import create_local_session, run_async
from gdp_rewards.jobs.broker import broker  # noqa: F401 - registers the broker
from gdp_rewards.services.reward.claim_service import RewardClaimService
from gdp_rewards.utils.exceptions import (
    FINAL_ERRORS,
    AlreadyClaimedError,
    StorageUnavailableError,
    is_retryable,
)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def should_retry_claim(retries_so_far: int, exception: BaseException) -> bool:
    """
    Retry policy for claim settlement.

    Args:
        retries_so_far: Retries already performed
        exception: Exception raised by the last attempt

    Returns:
        True only for retryable errors while retries remain
    """
    return is_retryable(exception) and retries_so_far < settings.reward_claim_max_retries


@dramatiq.actor(
    retry_when=should_retry_claim,
    min_backoff=settings.reward_claim_min_backoff_ms,
    max_backoff=settings.reward_claim_max_backoff_ms,
    time_limit=60_000,  # 1 min timeout
)
def settle_reward_claim(user_id: int, tier: str) -> dict:
    """
    Claim a reward tier for a user.

    Args:
        user_id: Claiming user ID
        tier: Tier id ("130", "150", ...)

    Returns:
        Dict with the settlement status
    """
    logger.info(f"Settling reward claim: user={user_id}, tier={tier}")
    return run_async(_settle_reward_claim_async(user_id, tier))


async def _settle_reward_claim_async(
    user_id: int,
    tier: str,
    session_factory: SessionFactory = create_local_session,
) -> dict:
    """
    Async implementation of claim settlement.

    Raises:
        StorageUnavailableError: Transient failure, the broker retries
    """
    async with session_factory() as session:
        service = RewardClaimService(session)
        try:
            claim = await service.claim(user_id, tier)
        except AlreadyClaimedError:
            logger.info(f"Reward claim already settled: user={user_id}, tier={tier}")
            return {"status": "already_claimed", "user_id": user_id, "tier": tier}
        except FINAL_ERRORS as e:
            logger.warning(f"Reward claim rejected: user={user_id}, tier={tier}: {e}")
            return {
                "status": "rejected",
                "user_id": user_id,
                "tier": tier,
                "reason": str(e),
            }
        except StorageUnavailableError as e:
            logger.warning(
                f"Reward claim deferred: user={user_id}, tier={tier}: {e}"
            )
            raise

    return {
        "status": "claimed",
        "user_id": user_id,
        "tier": tier,
        "claim_id": claim.id,
        "amount": str(claim.amount),
    }

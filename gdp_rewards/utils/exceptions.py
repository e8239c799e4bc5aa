"""
Exception handling utilities.

Defines the reward engine error taxonomy and the categories callers use to
decide between retrying, reporting and treating a call as settled.
"""

from typing import TYPE_CHECKING

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, TimeoutError as PoolTimeoutError

if TYPE_CHECKING:
    from gdp_rewards.services.reward.types import TierEvaluation


class RewardEngineError(Exception):
    """Base class for reward engine errors."""
    pass


class InvalidInputError(RewardEngineError, ValueError):
    """Raised for malformed counts, tier definitions or claim arguments."""
    pass


class UserNotFoundError(InvalidInputError):
    """Raised when the evaluated or claiming user does not exist."""

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class NotEligibleError(RewardEngineError):
    """Raised when a claim is attempted before the tier reaches 100%."""

    def __init__(
        self, user_id: int, tier: str, evaluation: "TierEvaluation | None" = None
    ) -> None:
        progress = evaluation.progress_percent if evaluation else 0.0
        super().__init__(
            f"User {user_id} is not eligible for tier {tier} "
            f"(progress {progress:.2f}%)"
        )
        self.user_id = user_id
        self.tier = tier
        self.evaluation = evaluation


class AlreadyClaimedError(RewardEngineError):
    """Raised when a tier has already been claimed by the user."""

    def __init__(self, user_id: int, tier: str) -> None:
        super().__init__(f"Tier {tier} already claimed by user {user_id}")
        self.user_id = user_id
        self.tier = tier


class StorageUnavailableError(RewardEngineError):
    """Raised when the claim store fails transiently (connectivity, contention)."""
    pass


# Exception categories based on handling strategy

# Caller may retry with backoff
RETRYABLE_ERRORS = (
    StorageUnavailableError,
)

# Claim is settled - idempotent retries land here
SETTLED_ERRORS = (
    AlreadyClaimedError,
)

# Final - surface to caller, never retry
FINAL_ERRORS = (
    InvalidInputError,
    NotEligibleError,
)

# Driver-level failures translated to StorageUnavailableError
TRANSIENT_STORAGE_ERRORS = (
    OperationalError,
    InterfaceError,
    PoolTimeoutError,
)


def is_retryable(exc: BaseException) -> bool:
    """
    Check if exception can be retried.

    Args:
        exc: Exception to check

    Returns:
        True if the caller should retry with backoff
    """
    return isinstance(exc, RETRYABLE_ERRORS)


def is_settled(exc: BaseException) -> bool:
    """
    Check if exception means the claim already went through.

    Args:
        exc: Exception to check

    Returns:
        True if exception signals an already settled claim
    """
    return isinstance(exc, SETTLED_ERRORS)


def is_transient_storage_error(exc: BaseException) -> bool:
    """
    Check if a database exception is a transient storage failure.

    Args:
        exc: Exception to check

    Returns:
        True for connectivity / contention errors
    """
    if isinstance(exc, TRANSIENT_STORAGE_ERRORS):
        return True
    return isinstance(exc, DBAPIError) and bool(exc.connection_invalidated)

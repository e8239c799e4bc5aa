"""
Base service class.

Session handling, bound logging and the operation logging decorator shared by
the reward services.
"""

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession


T = TypeVar("T")


class BaseService:
    """
    Base service class.

    Holds the session and a logger bound to the concrete service name.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize base service.

        Args:
            session: Async database session
        """
        self.session = session
        self.logger = logger.bind(service=self.__class__.__name__)

    async def commit(self) -> None:
        """Commit current transaction."""
        await self.session.commit()

    async def safe_rollback(self) -> None:
        """
        Roll back the current transaction, logging instead of raising on failure.

        Used on error paths so a dead connection cannot replace the error
        that caused the rollback. Expires every object loaded in the session.
        """
        try:
            await self.session.rollback()
        except SQLAlchemyError as rollback_error:
            self.logger.error(
                "Rollback failed",
                extra={"error": str(rollback_error)},
            )


def log_operation(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator to log service method entry/exit with timing.

    Failures are logged at warning level and re-raised.

    Usage:
        @log_operation
        async def claim(self, user_id: int, tier: str):
            ...
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        start_time = time.time()
        self.logger.debug(f"Starting {func.__name__}")

        try:
            result = await func(self, *args, **kwargs)
        except Exception as e:
            self.logger.warning(
                f"Failed {func.__name__}: {type(e).__name__}",
                extra={
                    "function": func.__name__,
                    "duration_seconds": round(time.time() - start_time, 3),
                    "error": str(e),
                },
            )
            raise

        self.logger.debug(
            f"Completed {func.__name__}",
            extra={
                "function": func.__name__,
                "duration_seconds": round(time.time() - start_time, 3),
            },
        )
        return result

    return wrapper

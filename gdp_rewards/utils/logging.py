"""
Logging setup.

Configures loguru sinks from settings.
"""

import sys

from loguru import logger

from gdp_rewards.config.settings import settings


def setup_logging() -> None:
    """Configure logger with stderr and optional file rotation."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    if settings.log_file:
        logger.add(
            settings.log_file,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            level=settings.log_level,
            encoding="utf-8",
        )

    logger.info("GDP reward engine logging configured")

"""
Dramatiq broker configuration.

Redis-based message broker for the reward task queue.
"""

import dramatiq
from dramatiq.brokers.redis import RedisBroker
from loguru import logger

from gdp_rewards.config.settings import settings
from gdp_rewards.utils.logging import setup_logging

setup_logging()

# Default middleware already includes ShutdownNotifications and Retries;
# retry policy is set per actor (see jobs.tasks.reward_claim)
redis_broker = RedisBroker(
    host=settings.redis_host,
    port=settings.redis_port,
    password=settings.redis_password if settings.redis_password else None,
    db=settings.redis_db,
)

dramatiq.set_broker(redis_broker)

broker = redis_broker

logger.info(
    f"Dramatiq broker initialized: "
    f"redis://{settings.redis_host}:{settings.redis_port}/{settings.redis_db}"
)

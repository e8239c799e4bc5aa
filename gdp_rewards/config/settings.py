"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False
    database_pool_size: int = Field(
        default=10, ge=1, le=100, description="Connection pool size"
    )

    # Redis (for the Dramatiq claim settlement queue)
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = None
    log_rotation: str = "1 day"
    log_retention: str = "7 days"

    # Reward engine
    reward_max_generation: int = Field(
        default=6,
        ge=1,
        le=10,
        description="Deepest referral generation counted for rewards",
    )
    reward_require_qualifying_lineage: bool = Field(
        default=False,
        description=(
            "Count a descendant only when every ancestor up to the "
            "evaluating user also holds the reference price"
        ),
    )

    # Claim settlement retries (StorageUnavailableError only)
    reward_claim_max_retries: int = Field(default=3, ge=0, le=20)
    reward_claim_min_backoff_ms: int = Field(default=1000, ge=0)
    reward_claim_max_backoff_ms: int = Field(default=60000, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Validate production-specific requirements."""
        if self.environment == 'production':
            if self.debug:
                raise ValueError(
                    'DEBUG must be False in production environment. '
                    'Set DEBUG=false in your .env file.'
                )
            if self.database_url.startswith('sqlite'):
                logger.warning(
                    'DATABASE_URL points at SQLite in production. '
                    'Concurrent claims across processes need PostgreSQL.'
                )
        return self

    @model_validator(mode='after')
    def validate_backoff(self) -> 'Settings':
        """Make sure the retry window is not inverted."""
        if self.reward_claim_min_backoff_ms > self.reward_claim_max_backoff_ms:
            raise ValueError(
                'REWARD_CLAIM_MIN_BACKOFF_MS must not exceed '
                'REWARD_CLAIM_MAX_BACKOFF_MS'
            )
        return self

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(
            ('postgresql://', 'postgresql+asyncpg://', 'sqlite+aiosqlite://')
        ):
            raise ValueError(
                'DATABASE_URL must start with postgresql://, '
                'postgresql+asyncpg:// or sqlite+aiosqlite://'
            )
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log level name."""
        level = v.upper()
        if level not in ('TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return level

    @property
    def async_database_url(self) -> str:
        """Database URL with an async driver."""
        if self.database_url.startswith('postgresql://'):
            return self.database_url.replace(
                'postgresql://', 'postgresql+asyncpg://', 1
            )
        return self.database_url


# Global settings instance
settings = Settings()

"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from decimal import Decimal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.config.business_constants import (
    DEFAULT_MIN_WITHDRAWAL,
    DEFAULT_WITHDRAWAL_FEE_PERCENT,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/affiliate.log"

    # Money
    currency: str = Field(
        default="BRL", min_length=3, max_length=3, description="ISO 4217 code"
    )

    # Withdrawals
    min_withdrawal_amount: Decimal = Field(
        default=DEFAULT_MIN_WITHDRAWAL,
        ge=0,
        description="Smallest amount an affiliate may request",
    )
    withdrawal_fee_percent: Decimal = Field(
        default=DEFAULT_WITHDRAWAL_FEE_PERCENT,
        ge=0,
        lt=100,
        description="Service fee withheld from each withdrawal, %",
    )

    # Hierarchy
    strict_hierarchy: bool = Field(
        default=False,
        description="Treat sponsor links to missing affiliates as corruption",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode='after')
    def validate_production(self) -> 'Settings':
        """Refuse debug mode and SQLite in production."""
        if self.environment == "production":
            if self.debug:
                raise ValueError("DEBUG must be disabled in production")
            if self.database_url.startswith("sqlite"):
                raise ValueError("SQLite is not supported in production")
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
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


# Global settings instance
settings = Settings()

"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
Values are read once at process start; the engine treats them as read-only.
"""

from decimal import Decimal

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = None

    # Referral tree
    max_referral_depth: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum ancestry level that can receive a commission",
    )

    # Money
    currency: str = Field(
        default="INR",
        min_length=3,
        max_length=3,
        description="ISO currency code of plan prices and wallets",
    )
    platform_wallet_id: str = Field(
        default="platform",
        min_length=1,
        max_length=64,
        description="Well-known identity of the platform-owned wallet",
    )

    # Plan prices
    basic_plan_price: Decimal = Field(
        default=Decimal("800"),
        gt=0,
        description="Price of the basic plan",
    )
    premium_plan_price: Decimal = Field(
        default=Decimal("2500"),
        gt=0,
        description="Price of the premium plan",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
            raise ValueError(
                "DATABASE_URL must start with postgresql+asyncpg:// "
                "or sqlite+aiosqlite://"
            )
        return v

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Normalize currency code."""
        return v.upper()

    @field_validator("basic_plan_price", "premium_plan_price")
    @classmethod
    def validate_price_precision(cls, v: Decimal) -> Decimal:
        """Plan prices must be expressible in minor currency units."""
        if v != v.quantize(Decimal("0.01")):
            raise ValueError(
                f"Plan price {v} has more than two decimal places"
            )
        return v

    @model_validator(mode="after")
    def validate_production(self) -> "Settings":
        """Validate production-specific requirements."""
        if self.environment == "production":
            if self.debug:
                raise ValueError(
                    "DEBUG must be False in production environment. "
                    "Set DEBUG=false in your .env file."
                )
            if self.database_url.startswith("sqlite"):
                logger.warning(
                    "DATABASE_URL points to SQLite in production. "
                    "Concurrent purchases will serialize on the database file."
                )
        return self


# Global settings instance
settings = Settings()

"""Configuration settings for the installment planner."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Flat settings read from environment variables or a ``.env`` file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", validation_alias="LOG_FORMAT"
    )

    # Installment plans
    max_installments: int = Field(
        default=60,
        ge=1,
        validation_alias="INSTALLMENT_MAX_COUNT",
        description="Largest installment count accepted when building a plan",
    )
    remainder_policy: Literal["none", "last"] = Field(
        default="none",
        validation_alias="INSTALLMENT_REMAINDER_POLICY",
        description="Where the rounding remainder of an equal split goes",
    )
    currency_quantum: Decimal = Field(
        default=Decimal("0.01"),
        gt=0,
        validation_alias="INSTALLMENT_CURRENCY_QUANTUM",
        description="Smallest currency unit amounts are rounded to",
    )
    installment_description_template: str = Field(
        default="{description} ({index}/{count})",
        validation_alias="INSTALLMENT_DESCRIPTION_TEMPLATE",
    )
    subscription_description_template: str = Field(
        default="{description} - Monthly subscription",
        validation_alias="SUBSCRIPTION_DESCRIPTION_TEMPLATE",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("log_format", "remainder_policy", mode="before")
    @classmethod
    def _lower_choice(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
Installment Plan Settings.

Configurable limits and schedule parameters for installment plans.
Environment variables use the INSTALLMENT_ prefix:
    INSTALLMENT_MAX_INSTALLMENT_COUNT=24
    INSTALLMENT_FIRST_DUE_OFFSET_MONTHS=0

Usage:
    from src.service.installments.settings import installment_settings

    # Or create custom settings for testing
    custom = InstallmentSettings(max_installment_count=6)
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InstallmentSettings(BaseSettings):
    """
    Parameters for plan construction.

    All monetary values are integers in the smallest currency unit.
    """

    model_config = SettingsConfigDict(
        env_prefix="INSTALLMENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    max_installment_count: int = Field(
        default=36,
        ge=1,
        description="Largest number of installments a plan may have",
    )
    first_due_offset_months: int = Field(
        default=1,
        ge=0,
        description="Months from today to the first due date when no start date is given",
    )
    due_interval_months: int = Field(
        default=1,
        ge=1,
        description="Calendar months between consecutive due dates",
    )


@lru_cache
def get_installment_settings() -> InstallmentSettings:
    """Get cached installment settings instance."""
    return InstallmentSettings()


installment_settings = get_installment_settings()

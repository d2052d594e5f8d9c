"""Configuration for batch and targeted recomputes.

All settings can be overridden via ``RECOMPUTE_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecomputeConfig(BaseSettings):
    """Configuration for the recompute runner."""

    model_config = SettingsConfigDict(
        env_prefix="RECOMPUTE_",
        case_sensitive=False,
        extra="ignore",
    )

    batch_size: int = Field(
        default=100,
        ge=1,
        le=10_000,
        description="Artisan codes fetched and scored per page.",
    )
    concurrency: int = Field(
        default=20,
        ge=1,
        le=256,
        description="Artisans scored and written concurrently within a page.",
    )

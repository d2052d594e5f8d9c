"""Configuration for the Provenance Factor estimator.

Controls the pseudo-observation prior and the one-sided credible bound.
All settings can be overridden via ``PROVENANCE_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProvenanceConfig(BaseSettings):
    """Configuration for the Normal-with-pseudo-observations provenance factor."""

    model_config = SettingsConfigDict(
        env_prefix="PROVENANCE_",
        case_sensitive=False,
        extra="ignore",
    )

    prior_strength: float = Field(
        default=20.0,
        gt=0.0,
        description="Number of pseudo-observations (C) blended into mean and variance.",
    )
    prior_mean: float = Field(
        default=2.0,
        ge=0.0,
        description="Prestige of each pseudo-observation (m); the Named Collector baseline.",
    )

    z_score: float = Field(
        default=1.645,
        gt=0.0,
        description="One-sided z-score for the lower credible bound.",
    )

    precision: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Decimal digits kept when the factor is stored.",
    )

    variance_tolerance: float = Field(
        default=1e-9,
        ge=0.0,
        description="Relative slack for the sum-of-squares consistency check (float rounding).",
    )

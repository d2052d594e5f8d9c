"""Configuration for the Elite Factor estimator.

Controls the Beta prior and the one-sided credible bound. All settings can
be overridden via ``ELITE_*`` environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EliteConfig(BaseSettings):
    """Configuration for the Beta-Binomial elite factor."""

    model_config = SettingsConfigDict(
        env_prefix="ELITE_",
        case_sensitive=False,
        extra="ignore",
    )

    # IMPORTANT: the Normal approximation to the Beta posterior is only
    # acceptable while alpha >= 1 and beta >= 1. The default Beta(1, 9) prior
    # guarantees this for every valid (e, n); the lower bounds below keep any
    # reconfigured prior inside that region. Re-derive before relaxing them.
    prior_alpha: float = Field(
        default=1.0,
        ge=1.0,
        description="Beta prior alpha (pseudo-elite works). Prior mean = alpha / (alpha + beta).",
    )
    prior_beta: float = Field(
        default=9.0,
        ge=1.0,
        description="Beta prior beta (pseudo-standard works).",
    )

    z_score: float = Field(
        default=1.645,
        gt=0.0,
        description="One-sided z-score for the lower credible bound (1.645 = 5th percentile).",
    )

    precision: int = Field(
        default=4,
        ge=1,
        le=10,
        description="Decimal digits kept when the factor is stored.",
    )

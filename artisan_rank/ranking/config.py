"""Configuration for the percentile/rank service.

All settings can be overridden via ``RANKING_*`` environment variables
(e.g., ``RANKING_TIE_METHOD=min``).
"""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RankingConfig(BaseSettings):
    """Configuration for within-domain percentiles, ranks, and grades."""

    model_config = SettingsConfigDict(
        env_prefix="RANKING_",
        case_sensitive=False,
        extra="ignore",
    )

    # Grade cut points on the 0-100 percentile scale (inclusive lower bounds)
    grade_s: float = Field(default=95.0, ge=0.0, le=100.0)
    grade_a: float = Field(default=80.0, ge=0.0, le=100.0)
    grade_b: float = Field(default=60.0, ge=0.0, le=100.0)
    grade_c: float = Field(default=40.0, ge=0.0, le=100.0)

    tie_method: Literal["average", "min"] = Field(
        default="average",
        description=(
            "How tied scores share a percentile: 'average' uses the mean of the "
            "positions the tie spans (fractional rank), 'min' the lowest position."
        ),
    )

    snapshot_ttl_seconds: float = Field(
        default=300.0,
        ge=0.0,
        description="Age after which a cached snapshot is recomputed (0 disables caching).",
    )

    min_population_count: int = Field(
        default=1,
        ge=0,
        description=(
            "Minimum works (elite) or observations (provenance) for an artisan "
            "to enter a ranked population."
        ),
    )

    @model_validator(mode="after")
    def _check_cut_points(self) -> "RankingConfig":
        if not self.grade_s >= self.grade_a >= self.grade_b >= self.grade_c:
            raise ValueError("grade cut points must satisfy S >= A >= B >= C")
        return self

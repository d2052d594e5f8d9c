"""Schema definitions for provenance observations and per-artisan summaries."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from artisan_rank.errors import ProvenanceAggregateError
from artisan_rank.prestige.schemas import PrestigeTier


@dataclass(frozen=True)
class ProvenanceObservation:
    """One documented historical owner of an artisan's certified works.

    Attributes:
        owner: Canonical owner identity (already normalized upstream).
        prestige_score: Score resolved from the prestige table.
        count: Number of the artisan's works documented with this owner.
    """

    owner: str
    prestige_score: float
    count: int = 1

    def __post_init__(self) -> None:
        if not self.owner:
            raise ProvenanceAggregateError("owner must be non-empty", count=self.count)
        if self.count < 1:
            raise ProvenanceAggregateError(
                "observation count must be at least 1", owner=self.owner, count=self.count
            )
        if not math.isfinite(self.prestige_score) or self.prestige_score < 0:
            raise ProvenanceAggregateError(
                "prestige_score must be finite and non-negative",
                owner=self.owner,
                prestige_score=self.prestige_score,
            )


@dataclass
class ArtisanProvenanceSummary:
    """Cached provenance aggregates for one artisan.

    Attributes:
        n: Real observations, counting multiplicity.
        sum_scores: Sum of prestige scores over the multiset.
        sum_sq_scores: Sum of squared prestige scores over the multiset.
        apex: Highest prestige score observed (display only).
        provenance_factor: Lower credible bound of mean prestige.
        tier_counts: Works per prestige tier (display only).
    """

    n: int = 0
    sum_scores: float = 0.0
    sum_sq_scores: float = 0.0
    apex: float = 0.0
    provenance_factor: float = 0.0
    tier_counts: dict[str, int] = field(default_factory=dict)

    @property
    def mean_score(self) -> float | None:
        """Unsmoothed mean prestige, None without observations."""
        if self.n == 0:
            return None
        return self.sum_scores / self.n

    @property
    def apex_tier(self) -> PrestigeTier | None:
        """Tier of the apex owner, None without observations."""
        if self.n == 0:
            return None
        return PrestigeTier.for_score(self.apex)

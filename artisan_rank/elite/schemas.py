"""Schema definitions for the elite factor posterior."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ElitePosterior:
    """Beta posterior summary for one artisan.

    Attributes:
        elite_count: Works with an elite designation.
        total_count: All designated works, elite or not.
        alpha: Posterior alpha (prior alpha + elite_count).
        beta: Posterior beta (prior beta + standard works).
        mean: Posterior mean.
        std: Normal-approximation standard deviation.
        lower_bound: ``max(0, mean - z * std)``, the elite factor.
    """

    elite_count: int
    total_count: int
    alpha: float
    beta: float
    mean: float
    std: float
    lower_bound: float

    @property
    def raw_ratio(self) -> float | None:
        """Unsmoothed elite ratio, None when there are no works."""
        if self.total_count == 0:
            return None
        return self.elite_count / self.total_count

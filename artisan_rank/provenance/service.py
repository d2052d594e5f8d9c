"""Normal-with-pseudo-observations provenance factor estimator.

Blends C pseudo-observations at the Named Collector baseline m with an
artisan's real prestige scores and reduces the augmented sample to a
one-sided lower bound of its mean:

    N   = C + n
    x   = (C*m + sum_s) / N
    V   = (C*m^2 + sum_sq) / N - x^2
    SE  = sqrt(V / N)
    pf  = max(0, x - z * SE)

The pseudo-observations enter the variance as well as the mean, so a few
scores far from the baseline widen the interval and pull the bound down.
One imperial owner is worth roughly 1.77, not 10.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from collections.abc import Iterable

from artisan_rank.errors import ProvenanceAggregateError
from artisan_rank.prestige.resolver import PrestigeTierResolver
from artisan_rank.prestige.schemas import PrestigeTier
from artisan_rank.provenance.config import ProvenanceConfig
from artisan_rank.provenance.schemas import (
    ArtisanProvenanceSummary,
    ProvenanceObservation,
)

logger = logging.getLogger(__name__)


def aggregate_owner_counts(works: Iterable[Iterable[str]]) -> list[tuple[str, int]]:
    """Collapse per-work owner lists into (owner, works) pairs.

    Each distinct owner counts once per work, blank names are skipped, and
    the output is ordered by work count descending, then owner name.

    Args:
        works: One iterable of canonical owner names per certified work.

    Returns:
        List of (owner, count) tuples.
    """
    counts: Counter[str] = Counter()
    for owners in works:
        seen = {owner.strip() for owner in owners if owner and owner.strip()}
        counts.update(seen)
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


class ProvenanceFactorEstimator:
    """Compute provenance factors from prestige-scored ownership records.

    Pure computation methods:
      - ``compute`` / ``score`` from (n, sum_s, sum_sq) aggregates
      - ``observe`` resolves (owner, count) pairs to observations
      - ``summarize`` builds the cached per-artisan summary

    Usage:
        estimator = ProvenanceFactorEstimator()
        obs = estimator.observe([("Maeda Family", 3), ("Nezu Museum", 1)])
        summary = estimator.summarize(obs)
        summary.provenance_factor
    """

    def __init__(
        self,
        config: ProvenanceConfig | None = None,
        resolver: PrestigeTierResolver | None = None,
    ) -> None:
        self._config = config or ProvenanceConfig()
        self._resolver = resolver or PrestigeTierResolver()

    @property
    def config(self) -> ProvenanceConfig:
        return self._config

    def validate(
        self,
        n: int,
        sum_scores: float,
        sum_sq_scores: float,
        *,
        artisan_code: str | None = None,
    ) -> None:
        """Reject aggregates that no multiset of non-negative scores can produce.

        Raises:
            ProvenanceAggregateError: On negative or non-finite values, non-zero
                sums without observations, or ``sum_sq < sum_s^2 / n``.
        """
        if n < 0:
            reason = "observation count must be non-negative"
        elif not (math.isfinite(sum_scores) and math.isfinite(sum_sq_scores)):
            reason = "aggregates must be finite"
        elif sum_scores < 0 or sum_sq_scores < 0:
            reason = "aggregates must be non-negative"
        elif n == 0:
            if sum_scores == 0 and sum_sq_scores == 0:
                return
            reason = "sums must be zero without observations"
        else:
            # Cauchy-Schwarz: n * sum_sq >= sum_s^2 for any real multiset
            slack = self._config.variance_tolerance * max(1.0, sum_scores * sum_scores)
            if n * sum_sq_scores >= sum_scores * sum_scores - slack:
                return
            reason = "sum of squares is smaller than (sum)^2 / n"

        logger.warning(
            "Rejected provenance aggregates for %s: %s (n=%s, sum=%r, sum_sq=%r)",
            artisan_code or "<unknown>", reason, n, sum_scores, sum_sq_scores,
        )
        raise ProvenanceAggregateError(
            reason,
            artisan_code=artisan_code,
            n=n,
            sum_scores=sum_scores,
            sum_sq_scores=sum_sq_scores,
        )

    def compute(
        self,
        n: int,
        sum_scores: float,
        sum_sq_scores: float,
        *,
        artisan_code: str | None = None,
    ) -> float:
        """Return the unrounded provenance factor.

        Args:
            n: Real observations, counting multiplicity.
            sum_scores: Sum of prestige scores.
            sum_sq_scores: Sum of squared prestige scores.
            artisan_code: Optional code attached to invariant errors.

        Raises:
            ProvenanceAggregateError: If the aggregates are inconsistent.
        """
        self.validate(n, sum_scores, sum_sq_scores, artisan_code=artisan_code)
        cfg = self._config
        c, m, z = cfg.prior_strength, cfg.prior_mean, cfg.z_score

        if n == 0:
            # The augmented variance is exactly zero here; discount the prior
            # by its own width m / sqrt(C) instead.
            return max(0.0, m - z * math.sqrt(m * m / c))

        total = c + n
        mean = (c * m + sum_scores) / total
        variance = max(0.0, (c * m * m + sum_sq_scores) / total - mean * mean)
        standard_error = math.sqrt(variance / total)
        return max(0.0, mean - z * standard_error)

    def score(
        self,
        n: int,
        sum_scores: float,
        sum_sq_scores: float,
        *,
        artisan_code: str | None = None,
    ) -> float:
        """Return the provenance factor rounded to the configured precision."""
        return round(
            self.compute(n, sum_scores, sum_sq_scores, artisan_code=artisan_code),
            self._config.precision,
        )

    def observe(self, owner_counts: Iterable[tuple[str, int]]) -> list[ProvenanceObservation]:
        """Resolve (owner, count) pairs into scored observations."""
        return [
            ProvenanceObservation(
                owner=owner,
                prestige_score=self._resolver.resolve(owner),
                count=count,
            )
            for owner, count in owner_counts
        ]

    def summarize(
        self,
        observations: Iterable[ProvenanceObservation],
        *,
        artisan_code: str | None = None,
    ) -> ArtisanProvenanceSummary:
        """Aggregate observations and compute the cached summary.

        Args:
            observations: The artisan's full current observation set.
            artisan_code: Optional code attached to invariant errors.

        Returns:
            ArtisanProvenanceSummary with the rounded provenance factor.
        """
        n = 0
        sum_scores = 0.0
        sum_sq_scores = 0.0
        apex = 0.0
        tier_counts: Counter[str] = Counter()

        # Sorted so float sums do not depend on storage order
        for obs in sorted(observations, key=lambda o: (o.owner, o.prestige_score, o.count)):
            n += obs.count
            sum_scores += obs.prestige_score * obs.count
            sum_sq_scores += obs.prestige_score * obs.prestige_score * obs.count
            apex = max(apex, obs.prestige_score)
            tier_counts[PrestigeTier.for_score(obs.prestige_score).value] += obs.count

        return ArtisanProvenanceSummary(
            n=n,
            sum_scores=sum_scores,
            sum_sq_scores=sum_sq_scores,
            apex=apex,
            provenance_factor=self.score(
                n, sum_scores, sum_sq_scores, artisan_code=artisan_code
            ),
            tier_counts=dict(tier_counts),
        )

"""Beta-Binomial elite factor estimator.

Computes a conservative elite factor from how many of an artisan's
designated works reached the elite tiers:
- Posterior: Beta(alpha0 + e, beta0 + n - e) with a Beta(1, 9) prior
  (prior mean 0.10, 10 pseudo-observations)
- Scalar: Normal-approximation lower credible bound
  ``max(0, mu - z * sigma)`` with z = 1.645 (one-sided 95%)

A single elite work out of one scores 0.0; long careers converge on their
true elite ratio from below.
"""

from __future__ import annotations

import logging
import math

from artisan_rank.elite.config import EliteConfig
from artisan_rank.elite.schemas import ElitePosterior
from artisan_rank.errors import EliteCountError

logger = logging.getLogger(__name__)


class EliteFactorEstimator:
    """Compute elite factors from (elite_count, total_count).

    The result is a pure function of the two counts, so batch and targeted
    recomputes agree bit for bit.

    Usage:
        estimator = EliteFactorEstimator()
        estimator.compute(29, 30)   # ~0.6388
        estimator.score(29, 30)     # 0.6388 (rounded for storage)
    """

    def __init__(self, config: EliteConfig | None = None) -> None:
        self._config = config or EliteConfig()

    @property
    def config(self) -> EliteConfig:
        return self._config

    @staticmethod
    def validate(
        elite_count: int,
        total_count: int,
        *,
        artisan_code: str | None = None,
    ) -> None:
        """Reject counts that break ``0 <= elite_count <= total_count``.

        Raises:
            EliteCountError: If either count is negative or elite exceeds total.
        """
        if total_count < 0:
            reason = "total_count must be non-negative"
        elif elite_count < 0:
            reason = "elite_count must be non-negative"
        elif elite_count > total_count:
            reason = "elite_count cannot exceed total_count"
        else:
            return

        logger.warning(
            "Rejected elite counts for %s: %s (elite_count=%d, total_count=%d)",
            artisan_code or "<unknown>", reason, elite_count, total_count,
        )
        raise EliteCountError(
            reason,
            artisan_code=artisan_code,
            elite_count=elite_count,
            total_count=total_count,
        )

    def posterior(
        self,
        elite_count: int,
        total_count: int,
        *,
        artisan_code: str | None = None,
    ) -> ElitePosterior:
        """Compute the full posterior summary.

        Formula:
            alpha = alpha0 + e,  beta = beta0 + n - e
            mu    = alpha / (alpha + beta)
            sigma = sqrt(alpha * beta / ((alpha + beta)^2 * (alpha + beta + 1)))
            lower = max(0, mu - z * sigma)

        Args:
            elite_count: Elite works (e).
            total_count: All designated works (n).
            artisan_code: Optional code attached to invariant errors.

        Returns:
            ElitePosterior with the lower bound as the elite factor.

        Raises:
            EliteCountError: If the counts violate their invariant.
        """
        self.validate(elite_count, total_count, artisan_code=artisan_code)
        cfg = self._config

        alpha = cfg.prior_alpha + elite_count
        beta = cfg.prior_beta + (total_count - elite_count)
        # alpha, beta >= 1 by config bounds, so every denominator is positive
        weight = alpha + beta

        mean = alpha / weight
        std = math.sqrt(alpha * beta / (weight * weight * (weight + 1.0)))
        lower = max(0.0, mean - cfg.z_score * std)

        return ElitePosterior(
            elite_count=elite_count,
            total_count=total_count,
            alpha=alpha,
            beta=beta,
            mean=mean,
            std=std,
            lower_bound=min(1.0, lower),
        )

    def compute(
        self,
        elite_count: int,
        total_count: int,
        *,
        artisan_code: str | None = None,
    ) -> float:
        """Return the unrounded elite factor in [0, 1]."""
        return self.posterior(
            elite_count, total_count, artisan_code=artisan_code
        ).lower_bound

    def score(
        self,
        elite_count: int,
        total_count: int,
        *,
        artisan_code: str | None = None,
    ) -> float:
        """Return the elite factor rounded to the configured precision."""
        return round(
            self.compute(elite_count, total_count, artisan_code=artisan_code),
            self._config.precision,
        )

"""Within-domain percentile, rank, and grade computation.

Percentiles are computed only inside one domain; swordsmith and
fitting-maker factors sit on structurally different scales and are never
compared. For a domain of N artisans:

    percentile = 100 * position / (N - 1)

where ``position`` is the number of scores strictly below (plus half the
other members of a tie under the default ``average`` tie method). Ranks
are dense and 1-based; ties share the better rank. Domains with zero or
one member are guarded explicitly and report percentile 100.

Components:
- PercentileService: Stateless ranking + cached async snapshots
"""

import logging
import time
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

import numpy as np

from artisan_rank.artisans.schemas import ArtisanDomain, ScoreFactor
from artisan_rank.errors import InvalidScoreError
from artisan_rank.observability.metrics import MetricsCollector, get_metrics
from artisan_rank.ranking.config import RankingConfig
from artisan_rank.ranking.schemas import Grade, PercentileSnapshot, RankEntry

if TYPE_CHECKING:
    from artisan_rank.artisans.repository import ArtisanRepository

logger = logging.getLogger(__name__)


class PercentileService:
    """Rank artisans within their domain.

    Pure computation methods (no DB, stateless):
      - ``rank``: percentiles/ranks/grades for one domain's scores
      - ``rank_population``: partitions mixed input by domain, then ranks
      - ``grade_for``: letter grade from a percentile

    Async orchestrator:
      - ``snapshot`` / ``lookup``: rank a stored population, cached with a TTL
    """

    def __init__(
        self,
        config: RankingConfig | None = None,
        repository: "ArtisanRepository | None" = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self._config = config or RankingConfig()
        self._repo = repository
        self._metrics = metrics
        self._cache: dict[tuple[str, str], tuple[float, PercentileSnapshot]] = {}

    # ── Pure computation methods ─────────────────────────

    def grade_for(self, percentile: float) -> Grade:
        """Map a 0-100 percentile to a letter grade."""
        cfg = self._config
        if percentile >= cfg.grade_s:
            return Grade.S
        if percentile >= cfg.grade_a:
            return Grade.A
        if percentile >= cfg.grade_b:
            return Grade.B
        if percentile >= cfg.grade_c:
            return Grade.C
        return Grade.D

    def rank(
        self,
        domain: str | ArtisanDomain,
        scores: Mapping[str, float],
    ) -> dict[str, RankEntry]:
        """Rank one domain's population.

        Args:
            domain: Domain tag the scores belong to.
            scores: artisan_id -> factor value.

        Returns:
            artisan_id -> RankEntry, ordered by score descending then id.

        Raises:
            UnknownDomainError: If the domain tag is not known.
            InvalidScoreError: If any score is NaN or infinite.
        """
        domain_value = ArtisanDomain.parse(domain).value
        if not scores:
            return {}

        # Sorted ids make ties and output order independent of input order
        ids = sorted(scores)
        values = np.array([float(scores[i]) for i in ids], dtype=np.float64)
        bad = ~np.isfinite(values)
        if bad.any():
            offenders = [ids[i] for i in np.flatnonzero(bad)[:5]]
            raise InvalidScoreError(
                f"Non-finite scores in domain {domain_value!r}: {offenders}"
            )

        n = len(ids)
        if n == 1:
            percentiles = np.array([100.0])
            ranks = np.array([1])
        else:
            ascending = np.sort(values)
            below = np.searchsorted(ascending, values, side="left")
            if self._config.tie_method == "average":
                at_or_below = np.searchsorted(ascending, values, side="right")
                position = (below + at_or_below - 1) / 2.0
            else:
                position = below.astype(np.float64)
            percentiles = 100.0 * position / (n - 1)

            distinct = np.unique(values)
            above = len(distinct) - np.searchsorted(distinct, values, side="right")
            ranks = above + 1

        order = sorted(range(n), key=lambda i: (-values[i], ids[i]))
        return {
            ids[i]: RankEntry(
                artisan_id=ids[i],
                domain=domain_value,
                score=float(values[i]),
                percentile=float(percentiles[i]),
                rank=int(ranks[i]),
                grade=self.grade_for(float(percentiles[i])),
            )
            for i in order
        }

    def rank_population(
        self,
        entries: Iterable[tuple[str, str | ArtisanDomain, float]],
    ) -> dict[str, dict[str, RankEntry]]:
        """Partition (artisan_id, domain, score) triples by domain and rank each.

        Returns:
            domain -> (artisan_id -> RankEntry).

        Raises:
            ValueError: If an artisan id appears more than once.
        """
        partitions: dict[str, dict[str, float]] = {}
        seen: set[str] = set()
        for artisan_id, domain, score in entries:
            if artisan_id in seen:
                raise ValueError(f"Artisan {artisan_id!r} appears more than once")
            seen.add(artisan_id)
            partitions.setdefault(ArtisanDomain.parse(domain).value, {})[artisan_id] = score

        return {
            domain: self.rank(domain, scores)
            for domain, scores in sorted(partitions.items())
        }

    # ── Async orchestrator ───────────────────────────────

    async def snapshot(
        self,
        domain: str | ArtisanDomain,
        factor: ScoreFactor | str = ScoreFactor.ELITE,
        *,
        refresh: bool = False,
    ) -> PercentileSnapshot:
        """Rank the stored population for a domain and factor.

        Snapshots are cached for ``snapshot_ttl_seconds``.

        Raises:
            RuntimeError: If no repository is configured.
        """
        if self._repo is None:
            raise RuntimeError("PercentileService has no repository configured")

        domain_value = ArtisanDomain.parse(domain).value
        factor = ScoreFactor(factor)
        key = (domain_value, factor.value)
        ttl = self._config.snapshot_ttl_seconds

        cached = self._cache.get(key)
        if cached is not None and not refresh and ttl > 0:
            stored_at, snap = cached
            if time.monotonic() - stored_at < ttl:
                return snap

        scores = await self._repo.list_scores(
            domain_value, factor, min_count=self._config.min_population_count
        )
        snap = PercentileSnapshot(
            domain=domain_value,
            factor=factor.value,
            entries=self.rank(domain_value, scores),
        )
        self._cache[key] = (time.monotonic(), snap)

        metrics = self._metrics or get_metrics()
        metrics.set_ranked_population(domain_value, factor.value, snap.population)
        logger.info(
            "Ranked %d %s artisans by %s factor",
            snap.population, domain_value, factor.value,
        )
        return snap

    async def lookup(
        self,
        codes: Iterable[str],
        domain: str | ArtisanDomain,
        factor: ScoreFactor | str = ScoreFactor.ELITE,
    ) -> dict[str, RankEntry]:
        """Return entries for the given codes; codes outside the population are omitted."""
        snap = await self.snapshot(domain, factor)
        return {code: snap.entries[code] for code in codes if code in snap.entries}

    def invalidate(self, domain: str | ArtisanDomain | None = None) -> None:
        """Drop cached snapshots, for one domain or all."""
        if domain is None:
            self._cache.clear()
            return
        domain_value = ArtisanDomain.parse(domain).value
        for key in [k for k in self._cache if k[0] == domain_value]:
            del self._cache[key]

"""Batch and targeted recompute of per-artisan factors.

Two entry points share one pure scoring function, so for unchanged
inputs a full sweep and a targeted recompute write identical values:

- ``recompute_codes``: triggered by upstream counter or observation changes
- ``recompute_all``: full sweep in ascending code order, resumable from a
  checkpoint and stoppable between artisans via an ``asyncio.Event``

Each artisan is scored independently and written in a single statement.
A rejected input withholds only its own factor; the failure is reported
in the result and never aborts the run.
"""

import asyncio
import logging
import time
from collections.abc import Iterable

from artisan_rank.artisans.repository import ArtisanRepository
from artisan_rank.artisans.schemas import ArtisanDomain, ArtisanRecord, ArtisanScores
from artisan_rank.elite.service import EliteFactorEstimator
from artisan_rank.errors import EliteCountError, InvariantViolationError
from artisan_rank.observability.metrics import MetricsCollector, get_metrics
from artisan_rank.provenance.schemas import ArtisanProvenanceSummary
from artisan_rank.provenance.service import ProvenanceFactorEstimator
from artisan_rank.recompute.config import RecomputeConfig
from artisan_rank.recompute.schemas import RecomputeResult

logger = logging.getLogger(__name__)

_FACTORS = ("elite", "provenance")

# Per-artisan outcomes
_UPDATED = "updated"
_NOT_FOUND = "not_found"
_ERROR = "error"
_SKIPPED = "skipped"


def _factor_of(error: InvariantViolationError) -> str:
    return "elite" if isinstance(error, EliteCountError) else "provenance"


class RecomputeService:
    """Recompute and persist elite and provenance factors.

    Usage:
        service = RecomputeService(ArtisanRepository(db))
        await service.recompute_codes(["MAS590", "KUN123"])

        stop = asyncio.Event()
        result = await service.recompute_all(stop_event=stop)
        if not result.completed:
            await service.recompute_all(resume_after=result.checkpoint)
    """

    def __init__(
        self,
        repository: ArtisanRepository,
        *,
        elite: EliteFactorEstimator | None = None,
        provenance: ProvenanceFactorEstimator | None = None,
        config: RecomputeConfig | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self._repo = repository
        self._elite = elite or EliteFactorEstimator()
        self._provenance = provenance or ProvenanceFactorEstimator()
        self._config = config or RecomputeConfig()
        self._metrics = metrics

    @property
    def metrics(self) -> MetricsCollector:
        return self._metrics or get_metrics()

    # ── Pure scoring ─────────────────────────────────────

    def score_artisan(
        self,
        record: ArtisanRecord,
        owner_counts: Iterable[tuple[str, int]],
    ) -> ArtisanScores:
        """Compute both factors for one artisan from its current inputs.

        The two factors share no state. A rejected input withholds only its
        own factor; the error is attributed to the artisan and returned in
        ``rejected``.
        """
        rejected: list[InvariantViolationError] = []

        elite_factor: float | None = None
        try:
            elite_factor = self._elite.score(
                record.elite_count, record.total_count, artisan_code=record.code
            )
        except InvariantViolationError as e:
            rejected.append(e if e.artisan_code is not None else e.with_code(record.code))

        summary: ArtisanProvenanceSummary | None = None
        try:
            summary = self._provenance.summarize(
                self._provenance.observe(owner_counts), artisan_code=record.code
            )
        except InvariantViolationError as e:
            rejected.append(e if e.artisan_code is not None else e.with_code(record.code))

        return ArtisanScores(
            code=record.code,
            elite_factor=elite_factor,
            provenance=summary,
            rejected=tuple(rejected),
        )

    # ── Entry points ─────────────────────────────────────

    async def recompute_codes(self, codes: Iterable[str]) -> RecomputeResult:
        """Recompute a targeted set of artisans.

        Args:
            codes: Artisan codes whose inputs changed. Duplicates are ignored.

        Returns:
            RecomputeResult; unknown codes are counted in ``not_found``.
        """
        start = time.monotonic()
        unique = sorted(set(codes))
        result = RecomputeResult(scope="codes", requested=len(unique))

        for i in range(0, len(unique), self._config.batch_size):
            page = unique[i:i + self._config.batch_size]
            await self._process_page(page, result, stop_event=None)

        self._finish(result, start)
        return result

    async def recompute_all(
        self,
        *,
        domain: str | ArtisanDomain | None = None,
        resume_after: str | None = None,
        stop_event: asyncio.Event | None = None,
    ) -> RecomputeResult:
        """Sweep every artisan (optionally one domain) in ascending code order.

        Args:
            domain: Restrict the sweep to one domain.
            resume_after: Checkpoint from a previous interrupted run.
            stop_event: Set to stop cooperatively between artisans.

        Returns:
            RecomputeResult whose ``checkpoint`` can be passed back as
            ``resume_after`` when ``completed`` is False.
        """
        start = time.monotonic()
        domain_value = ArtisanDomain.parse(domain).value if domain is not None else None
        result = RecomputeResult(scope="all", checkpoint=resume_after)
        cursor = resume_after

        while True:
            if stop_event is not None and stop_event.is_set():
                result.completed = False
                break

            page = await self._repo.list_codes(
                domain=domain_value, after=cursor, limit=self._config.batch_size
            )
            if not page:
                break

            outcomes = await self._process_page(page, result, stop_event=stop_event)
            result.requested += sum(1 for s in outcomes if s != _SKIPPED)

            # Advance only across the fully processed prefix of the page
            for code, status in zip(page, outcomes):
                if status == _SKIPPED:
                    result.completed = False
                    break
                result.checkpoint = code
            if not result.completed:
                break
            cursor = page[-1]

        if not result.completed:
            logger.info("Recompute stopped early at checkpoint %s", result.checkpoint)
        self._finish(result, start)
        return result

    # ── Internals ────────────────────────────────────────

    async def _process_page(
        self,
        page: list[str],
        result: RecomputeResult,
        *,
        stop_event: asyncio.Event | None,
    ) -> list[str]:
        """Score and write one page of codes, returning a status per code."""
        records = await self._repo.get_batch(page)
        owners = await self._repo.get_owner_counts_batch(
            [code for code in page if code in records]
        )
        semaphore = asyncio.Semaphore(self._config.concurrency)

        async def run(code: str) -> str:
            async with semaphore:
                if stop_event is not None and stop_event.is_set():
                    return _SKIPPED
                record = records.get(code)
                if record is None:
                    logger.debug("No artisan record for %s", code)
                    for factor in _FACTORS:
                        self.metrics.record_recompute(factor, _NOT_FOUND)
                    return _NOT_FOUND
                return await self._recompute_one(record, owners.get(code, []), result)

        outcomes = await asyncio.gather(*(run(code) for code in page))

        result.not_found += outcomes.count(_NOT_FOUND)
        return list(outcomes)

    async def _recompute_one(
        self,
        record: ArtisanRecord,
        owner_counts: list[tuple[str, int]],
        result: RecomputeResult,
    ) -> str:
        scores = self.score_artisan(record, owner_counts)
        for error in scores.rejected:
            factor = _factor_of(error)
            logger.warning("Rejected %s inputs for %s: %s", factor, record.code, error)
            self.metrics.record_invariant_violation(factor)
            self.metrics.record_recompute(factor, _ERROR)
            result.errors.append(str(error))
        if scores.rejected:
            result.failed.append(record.code)
        if scores.is_empty:
            return _ERROR

        written_factors = [
            factor
            for factor, value in zip(_FACTORS, (scores.elite_factor, scores.provenance))
            if value is not None
        ]
        try:
            written = await self._repo.save_scores(scores)
        except Exception as e:
            logger.error("Failed to save factors for %s: %s", record.code, e)
            for factor in written_factors:
                self.metrics.record_recompute(factor, _ERROR)
            if not scores.rejected:
                result.failed.append(record.code)
            result.errors.append(f"save:{record.code}: {e}")
            return _ERROR

        if not written:
            # Deleted between read and write
            for factor in written_factors:
                self.metrics.record_recompute(factor, _NOT_FOUND)
            return _NOT_FOUND
        for factor in written_factors:
            self.metrics.record_recompute(factor, _UPDATED)
        result.updated += 1
        return _UPDATED

    def _finish(self, result: RecomputeResult, start: float) -> None:
        result.failed.sort()
        result.elapsed_seconds = time.monotonic() - start
        self.metrics.record_recompute_run(result.scope, result.elapsed_seconds)
        logger.info(
            "Recompute (%s) finished: %d updated, %d not found, %d failed in %.2fs",
            result.scope,
            result.updated,
            result.not_found,
            len(result.failed),
            result.elapsed_seconds,
        )

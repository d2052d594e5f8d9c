"""
Prometheus metrics for the scoring engine.

Defines and exposes metrics for:
- Per-artisan recompute outcomes (by factor and status)
- Rejected invariant violations from the upstream aggregation layer
- Batch and targeted recompute latency
- Ranked population size per domain

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import Counter, Gauge, Histogram, start_http_server

from artisan_rank.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for recompute histograms (in seconds); full sweeps run for minutes
RECOMPUTE_BUCKETS = (0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0, 60.0, 300.0, 900.0)


class MetricsCollector:
    """
    Prometheus metrics collector for the artisan-rank engine.

    Usage:
        metrics = get_metrics()
        metrics.artisans_recomputed.labels(factor="elite", status="updated").inc()
        metrics.recompute_latency.labels(scope="all").observe(12.5)
    """

    def __init__(self):
        """Initialize Prometheus metrics."""

        self.artisans_recomputed = Counter(
            "artisan_rank_recomputed_total",
            "Total number of artisan factor recomputations",
            ["factor", "status"],  # status: updated, not_found, error
        )

        self.invariant_violations = Counter(
            "artisan_rank_invariant_violations_total",
            "Inputs rejected because an aggregate invariant did not hold",
            ["factor"],
        )

        self.recompute_latency = Histogram(
            "artisan_rank_recompute_seconds",
            "Wall time of a recompute run",
            ["scope"],  # all, codes
            buckets=RECOMPUTE_BUCKETS,
        )

        self.ranked_population = Gauge(
            "artisan_rank_ranked_population",
            "Number of artisans in the last computed percentile snapshot",
            ["domain", "factor"],
        )

        self._server_started = False

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus HTTP server for metrics scraping.

        Args:
            port: Port to listen on (defaults to settings.metrics_port)
        """
        if self._server_started:
            logger.warning("Metrics server already started")
            return

        port = port or get_settings().metrics_port
        start_http_server(port)
        self._server_started = True
        logger.info("Metrics server started on port %d", port)

    def record_recompute(self, factor: str, status: str, count: int = 1) -> None:
        """
        Record per-artisan recompute outcomes.

        Args:
            factor: Factor name (elite, provenance)
            status: Outcome (updated, not_found, error)
            count: Number of artisans
        """
        if count > 0:
            self.artisans_recomputed.labels(factor=factor, status=status).inc(count)

    def record_invariant_violation(self, factor: str) -> None:
        """Record a rejected aggregate for one factor."""
        self.invariant_violations.labels(factor=factor).inc()

    def record_recompute_run(self, scope: str, latency: float) -> None:
        """
        Record the wall time of a recompute run.

        Args:
            scope: Run scope (all, codes)
            latency: Elapsed seconds
        """
        if latency > 0:
            self.recompute_latency.labels(scope=scope).observe(latency)

    def set_ranked_population(self, domain: str, factor: str, size: int) -> None:
        """Set the population size of the latest snapshot for a domain/factor."""
        self.ranked_population.labels(domain=domain, factor=factor).set(size)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics

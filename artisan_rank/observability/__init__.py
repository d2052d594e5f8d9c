"""Observability layer - logging and metrics."""

from artisan_rank.observability.logging import bind_context, clear_context, setup_logging
from artisan_rank.observability.metrics import MetricsCollector, get_metrics

__all__ = [
    "bind_context",
    "clear_context",
    "setup_logging",
    "MetricsCollector",
    "get_metrics",
]

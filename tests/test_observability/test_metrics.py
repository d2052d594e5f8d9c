"""Tests for the Prometheus metrics collector."""

from prometheus_client import REGISTRY

from artisan_rank.observability.metrics import get_metrics


def _sample(name, labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestMetricsCollector:
    def test_singleton(self):
        assert get_metrics() is get_metrics()

    def test_record_recompute(self):
        labels = {"factor": "elite", "status": "updated"}
        before = _sample("artisan_rank_recomputed_total", labels)

        get_metrics().record_recompute("elite", "updated", 3)
        get_metrics().record_recompute("elite", "updated", 0)

        assert _sample("artisan_rank_recomputed_total", labels) == before + 3

    def test_record_invariant_violation(self):
        labels = {"factor": "provenance"}
        before = _sample("artisan_rank_invariant_violations_total", labels)

        get_metrics().record_invariant_violation("provenance")

        assert _sample("artisan_rank_invariant_violations_total", labels) == before + 1

    def test_set_ranked_population(self):
        get_metrics().set_ranked_population("smith", "elite", 812)
        value = REGISTRY.get_sample_value(
            "artisan_rank_ranked_population", {"domain": "smith", "factor": "elite"}
        )
        assert value == 812

    def test_record_recompute_run(self):
        labels = {"scope": "codes"}
        before = _sample("artisan_rank_recompute_seconds_count", labels)

        get_metrics().record_recompute_run("codes", 0.25)

        assert _sample("artisan_rank_recompute_seconds_count", labels) == before + 1

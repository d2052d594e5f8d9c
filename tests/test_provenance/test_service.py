"""Tests for the provenance factor estimator."""

import logging
import math

import pytest

from artisan_rank.errors import InvariantViolationError, ProvenanceAggregateError
from artisan_rank.prestige.resolver import PrestigeTierResolver
from artisan_rank.prestige.schemas import PrestigeTier
from artisan_rank.prestige.table import PrestigeTierTable
from artisan_rank.provenance.config import ProvenanceConfig
from artisan_rank.provenance.schemas import ProvenanceObservation
from artisan_rank.provenance.service import (
    ProvenanceFactorEstimator,
    aggregate_owner_counts,
)


@pytest.fixture
def estimator() -> ProvenanceFactorEstimator:
    return ProvenanceFactorEstimator()


class TestCompute:
    """Tests for the closed-form lower bound."""

    def test_no_observations(self, estimator):
        expected = 2.0 - 1.645 * math.sqrt(4.0 / 20.0)
        assert estimator.compute(0, 0.0, 0.0) == pytest.approx(expected)
        assert estimator.compute(0, 0.0, 0.0) == pytest.approx(1.2643336, abs=1e-6)

    def test_no_observations_below_single_maximal_owner(self, estimator):
        assert estimator.compute(0, 0.0, 0.0) < estimator.compute(1, 10.0, 100.0)

    def test_three_imperial_owners(self, estimator):
        assert estimator.score(3, 30.0, 300.0) == 2.12

    def test_single_imperial_owner(self, estimator):
        assert estimator.score(1, 10.0, 100.0) == 1.77

    def test_single_baseline_owner(self, estimator):
        assert estimator.compute(1, 2.0, 4.0) == pytest.approx(2.0)

    def test_all_baseline_owners_zero_variance(self, estimator):
        value = estimator.compute(1000, 2000.0, 4000.0)
        assert not math.isnan(value)
        assert value == pytest.approx(2.0)

    def test_converges_to_true_mean(self, estimator):
        n = 1_000_000
        mean, variance = 6.0, 4.0
        value = estimator.compute(n, n * mean, n * (variance + mean * mean))
        assert value == pytest.approx(6.0, abs=0.01)
        assert value < 6.0

    def test_bounded_by_prestige_scale(self, estimator):
        for n in (1, 5, 50, 500):
            value = estimator.compute(n, 10.0 * n, 100.0 * n)
            assert 0.0 <= value <= 10.0

    def test_more_maximal_owners_raise_factor(self, estimator):
        values = [estimator.compute(n, 10.0 * n, 100.0 * n) for n in range(1, 30)]
        assert values == sorted(values)

    def test_rounded_to_two_decimals(self, estimator):
        assert estimator.score(1, 10.0, 100.0) == round(estimator.compute(1, 10.0, 100.0), 2)

    def test_custom_prior_strength(self):
        weak = ProvenanceFactorEstimator(ProvenanceConfig(prior_strength=5.0))
        strong = ProvenanceFactorEstimator()
        assert weak.compute(3, 30.0, 300.0) > strong.compute(3, 30.0, 300.0)


class TestValidation:
    """Tests for aggregate invariant checks."""

    def test_sum_of_squares_too_small(self, estimator):
        with pytest.raises(ProvenanceAggregateError, match="sum of squares") as exc_info:
            estimator.compute(2, 10.0, 40.0, artisan_code="KUN10")
        assert exc_info.value.artisan_code == "KUN10"
        assert exc_info.value.values == {"n": 2, "sum_scores": 10.0, "sum_sq_scores": 40.0}

    def test_sums_without_observations(self, estimator):
        with pytest.raises(ProvenanceAggregateError, match="without observations"):
            estimator.compute(0, 10.0, 100.0)

    def test_negative_count(self, estimator):
        with pytest.raises(ProvenanceAggregateError):
            estimator.compute(-1, 0.0, 0.0)

    def test_negative_sum(self, estimator):
        with pytest.raises(ProvenanceAggregateError):
            estimator.compute(1, -2.0, 4.0)

    @pytest.mark.parametrize("bad", [float("nan"), float("inf")])
    def test_non_finite_sums(self, estimator, bad):
        with pytest.raises(ProvenanceAggregateError, match="finite"):
            estimator.compute(1, bad, 4.0)

    def test_float_noise_at_equality_accepted(self, estimator):
        scores = [0.1, 0.1, 0.1]
        sum_s = sum(scores)
        sum_sq = sum(s * s for s in scores)
        estimator.validate(3, sum_s, sum_sq)

    def test_is_an_invariant_violation(self, estimator):
        with pytest.raises(InvariantViolationError):
            estimator.compute(2, 10.0, 40.0)

    def test_rejection_logged(self, estimator, caplog):
        with caplog.at_level(logging.WARNING, logger="artisan_rank.provenance.service"):
            with pytest.raises(ProvenanceAggregateError):
                estimator.compute(2, 10.0, 40.0, artisan_code="MAS590")

        assert "Rejected provenance aggregates for MAS590" in caplog.text


class TestObserveAndSummarize:
    """Tests for observation resolution and per-artisan summaries."""

    def test_observe_resolves_scores(self, estimator):
        obs = estimator.observe([("Imperial Family", 3), ("Unknown Collector", 1)])
        assert obs == [
            ProvenanceObservation("Imperial Family", 10.0, 3),
            ProvenanceObservation("Unknown Collector", 2.0, 1),
        ]

    def test_multiplicity_counts(self, estimator):
        summary = estimator.summarize(estimator.observe([("Imperial Family", 3)]))
        assert summary.n == 3
        assert summary.sum_scores == 30.0
        assert summary.sum_sq_scores == 300.0
        assert summary.provenance_factor == 2.12

    def test_repeated_singletons_match_counted_observation(self, estimator):
        counted = estimator.summarize([ProvenanceObservation("Imperial Family", 10.0, 3)])
        repeated = estimator.summarize([ProvenanceObservation("Imperial Family", 10.0)] * 3)
        assert counted == repeated

    def test_apex_and_tiers_are_display_only(self, estimator):
        summary = estimator.summarize(
            estimator.observe([("Imperial Family", 1), ("Nezu Museum", 2)])
        )
        assert summary.apex == 10.0
        assert summary.apex_tier == PrestigeTier.IMPERIAL
        assert summary.tier_counts == {"imperial": 1, "institution": 2}
        assert summary.provenance_factor == estimator.score(3, 16.0, 118.0)

    def test_order_independent(self, estimator):
        pairs = [("Maeda Family", 2), ("Nezu Museum", 1), ("Mitsui Family", 4), ("X", 1)]
        forward = estimator.summarize(estimator.observe(pairs))
        backward = estimator.summarize(estimator.observe(list(reversed(pairs))))
        assert forward == backward

    def test_empty_summary(self, estimator):
        summary = estimator.summarize([])
        assert summary.n == 0
        assert summary.apex == 0.0
        assert summary.apex_tier is None
        assert summary.mean_score is None
        assert summary.tier_counts == {}
        assert summary.provenance_factor == 1.26

    def test_injected_resolver(self):
        table = PrestigeTierTable(groups={"Local Shrine": PrestigeTier.IMPERIAL})
        estimator = ProvenanceFactorEstimator(resolver=PrestigeTierResolver(table))
        summary = estimator.summarize(estimator.observe([("Local Shrine", 1)]))
        assert summary.provenance_factor == 1.77


class TestAggregateOwnerCounts:
    """Tests for collapsing per-work owner lists."""

    def test_counts_each_owner_once_per_work(self):
        works = [
            ["Maeda Family", "Nezu Museum"],
            ["Maeda Family", "Maeda Family"],
            ["Mitsui Family"],
        ]
        assert aggregate_owner_counts(works) == [
            ("Maeda Family", 2),
            ("Mitsui Family", 1),
            ("Nezu Museum", 1),
        ]

    def test_blank_names_skipped(self):
        assert aggregate_owner_counts([["", "   "], []]) == []

    def test_whitespace_stripped(self):
        works = [[" Nezu Museum "], ["Nezu Museum"]]
        assert aggregate_owner_counts(works) == [("Nezu Museum", 2)]

    def test_ordered_by_count_then_name(self):
        works = [["B"], ["B"], ["A"], ["C"], ["C"]]
        assert aggregate_owner_counts(works) == [("B", 2), ("C", 2), ("A", 1)]

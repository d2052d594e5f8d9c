"""Tests for environment-driven configuration."""

import pytest

from artisan_rank.config.settings import Settings, get_settings
from artisan_rank.elite.config import EliteConfig
from artisan_rank.provenance.config import ProvenanceConfig
from artisan_rank.ranking.config import RankingConfig
from artisan_rank.recompute.config import RecomputeConfig


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.environment == "development"
        assert not settings.is_production
        assert settings.db_pool_max_size == 20

    def test_fixture_settings(self, test_settings):
        assert test_settings.log_level == "DEBUG"
        assert "artisan_rank_test" in str(test_settings.database_url)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("METRICS_PORT", "9100")
        settings = Settings(_env_file=None)
        assert settings.is_production
        assert settings.metrics_port == 9100

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestComponentConfigs:
    """Each component reads its own prefixed variables."""

    def test_elite_prefix(self, monkeypatch):
        monkeypatch.setenv("ELITE_PRIOR_BETA", "19")
        assert EliteConfig().prior_beta == 19.0

    def test_provenance_prefix(self, monkeypatch):
        monkeypatch.setenv("PROVENANCE_PRIOR_STRENGTH", "10")
        config = ProvenanceConfig()
        assert config.prior_strength == 10.0
        assert config.prior_mean == 2.0

    def test_provenance_prior_strength_positive(self):
        with pytest.raises(ValueError):
            ProvenanceConfig(prior_strength=0)

    def test_ranking_prefix(self, monkeypatch):
        monkeypatch.setenv("RANKING_TIE_METHOD", "min")
        assert RankingConfig().tie_method == "min"

    def test_ranking_rejects_unknown_tie_method(self):
        with pytest.raises(ValueError):
            RankingConfig(tie_method="dense")

    def test_recompute_defaults(self):
        config = RecomputeConfig()
        assert config.batch_size == 100
        assert config.concurrency == 20

"""Tests for owner-identity resolution."""

import pytest

from artisan_rank.prestige.resolver import PrestigeTierResolver
from artisan_rank.prestige.schemas import PrestigeTier
from artisan_rank.prestige.table import PrestigeTierTable


@pytest.fixture
def table() -> PrestigeTierTable:
    """Small substitute table."""
    return PrestigeTierTable(
        groups={
            "Tokugawa Shogun Family": PrestigeTier.SHOGUNAL,
            "Oda Family": PrestigeTier.MAJOR_DAIMYO,
            "Nezu Museum": PrestigeTier.INSTITUTION,
        },
        members={
            "Tokugawa Iemitsu": "Tokugawa Shogun Family",
            "Oda Nobunaga": "Oda Family",
        },
        overrides={"Oda Nobunaga": 9.0},
    )


@pytest.fixture
def resolver(table) -> PrestigeTierResolver:
    return PrestigeTierResolver(table)


class TestResolve:
    """Tests for the exact-match lookup chain."""

    def test_group_match(self, resolver):
        assert resolver.resolve("Nezu Museum") == 3.0

    def test_member_inherits_group(self, resolver):
        assert resolver.resolve("Tokugawa Iemitsu") == 9.0

    def test_override_takes_precedence(self, resolver):
        assert resolver.resolve("Oda Nobunaga") == 9.0
        assert resolver.resolve("Oda Family") == 6.0

    def test_unknown_identity_gets_default(self, resolver):
        assert resolver.resolve("Some Private Collector") == 2.0

    def test_no_fuzzy_matching(self, resolver):
        # Prefix and case variants are upstream normalization concerns
        assert resolver.resolve("Tokugawa Ieyasu") == 2.0
        assert resolver.resolve("nezu museum") == 2.0

    def test_empty_identity_gets_default(self, resolver):
        assert resolver.resolve("") == 2.0

    def test_deterministic(self, resolver):
        owners = ["Nezu Museum", "Oda Nobunaga", "Unknown", "Tokugawa Iemitsu"]
        assert [resolver.resolve(o) for o in owners] == [resolver.resolve(o) for o in owners]

    def test_custom_default(self):
        resolver = PrestigeTierResolver(PrestigeTierTable(groups={}, default_score=3.0))
        assert resolver.resolve("Anyone") == 3.0

    def test_uses_default_table_when_not_injected(self):
        resolver = PrestigeTierResolver()
        assert resolver.resolve("Imperial Family") == 10.0
        assert resolver.resolve("Tokugawa Iemitsu") == 9.0


class TestResolveTier:
    """Tests for display tier resolution."""

    def test_group_tier(self, resolver):
        assert resolver.resolve_tier("Nezu Museum") == PrestigeTier.INSTITUTION

    def test_override_bucketed_by_score(self, resolver):
        assert resolver.resolve_tier("Oda Nobunaga") == PrestigeTier.SHOGUNAL

    def test_unknown_is_named_collector(self, resolver):
        assert resolver.resolve_tier("Nobody") == PrestigeTier.NAMED_COLLECTOR

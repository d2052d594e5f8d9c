"""Fixtures for recompute tests: an in-memory artisan store."""

import asyncio
from unittest.mock import MagicMock

import pytest

from artisan_rank.artisans.schemas import ArtisanRecord, ArtisanScores
from artisan_rank.recompute.config import RecomputeConfig
from artisan_rank.recompute.service import RecomputeService


class FakeArtisanRepository:
    """Implements the repository methods RecomputeService uses, in memory."""

    def __init__(self, records, owners=None):
        self.records = {r.code: r for r in records}
        self.owners = dict(owners or {})
        self.saved: dict[str, ArtisanScores] = {}
        self.save_order: list[str] = []
        self.stop_after: int | None = None
        self.stop_event: asyncio.Event | None = None
        self.fail_on: set[str] = set()
        self.vanish_on_save: set[str] = set()

    async def list_codes(self, *, domain=None, after=None, limit=100):
        codes = sorted(
            code
            for code, record in self.records.items()
            if (domain is None or record.domain == domain) and (after is None or code > after)
        )
        return codes[:limit]

    async def get_batch(self, codes):
        return {code: self.records[code] for code in codes if code in self.records}

    async def get_owner_counts_batch(self, codes):
        return {code: list(self.owners[code]) for code in codes if code in self.owners}

    async def save_scores(self, scores):
        if scores.code in self.fail_on:
            raise ConnectionError("connection reset")
        if scores.code in self.vanish_on_save:
            return False
        self.saved[scores.code] = scores
        self.save_order.append(scores.code)
        if self.stop_after is not None and len(self.save_order) >= self.stop_after:
            self.stop_event.set()
        return True


def make_records():
    return [
        ArtisanRecord(code="A", domain="smith", elite_count=29, total_count=30),
        ArtisanRecord(code="B", domain="smith", elite_count=59, total_count=93),
        ArtisanRecord(code="C", domain="fitting-maker", elite_count=17, total_count=75),
        ArtisanRecord(code="D", domain="smith", elite_count=1, total_count=1),
        ArtisanRecord(code="E", domain="fitting-maker"),
    ]


def make_owners():
    return {
        "A": [("Imperial Family", 3)],
        "B": [("Maeda Family", 2), ("Nezu Museum", 1)],
        "D": [("Some Collector", 1)],
    }


@pytest.fixture
def new_repo():
    """Factory for fresh stores holding the same artisans."""

    def _new():
        return FakeArtisanRepository(make_records(), make_owners())

    return _new


@pytest.fixture
def fake_repo(new_repo):
    return new_repo()


@pytest.fixture
def make_service(mock_metrics):
    """Build a RecomputeService over a repository with metrics mocked out."""

    def _make(repo, **config):
        return RecomputeService(
            repo,
            config=RecomputeConfig(**config),
            metrics=mock_metrics,
        )

    return _make

"""Schema definitions for ranked populations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Grade(str, Enum):
    """Coarse letter grade derived from a within-domain percentile."""

    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"


@dataclass(frozen=True)
class RankEntry:
    """One artisan's standing within its domain.

    Attributes:
        artisan_id: Artisan code.
        domain: Domain the ranking was computed in.
        score: The factor value that was ranked.
        percentile: 0-100, share of the domain scoring below.
        rank: Dense 1-based rank; ties share the better number.
        grade: Letter grade from the percentile cut points.
    """

    artisan_id: str
    domain: str
    score: float
    percentile: float
    rank: int
    grade: Grade


@dataclass
class PercentileSnapshot:
    """Ranked population for one (domain, factor) at a point in time.

    Attributes:
        domain: Ranked domain.
        factor: Ranked factor (elite / provenance).
        entries: artisan_id -> RankEntry, ordered best first.
        computed_at: When the snapshot was computed.
    """

    domain: str
    factor: str
    entries: dict[str, RankEntry] = field(default_factory=dict)
    computed_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @property
    def population(self) -> int:
        return len(self.entries)

    def top(self, limit: int) -> list[RankEntry]:
        """Best ``limit`` entries."""
        return list(self.entries.values())[:limit]

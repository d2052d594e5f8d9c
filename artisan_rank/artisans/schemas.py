"""Schema definitions for artisan records.

Maps 1:1 to the ``artisans`` database table. Each record holds the raw
designation counters fed by upstream aggregation plus the cached factors
derived from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from artisan_rank.errors import (
    EliteCountError,
    InvariantViolationError,
    UnknownDomainError,
)
from artisan_rank.provenance.schemas import ArtisanProvenanceSummary


class ArtisanDomain(str, Enum):
    """Mutually exclusive population an artisan is ranked within."""

    SMITH = "smith"
    FITTING_MAKER = "fitting-maker"

    @classmethod
    def parse(cls, value: str | ArtisanDomain) -> ArtisanDomain:
        """Parse a domain tag, raising UnknownDomainError for anything else."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = sorted(d.value for d in cls)
            raise UnknownDomainError(
                f"Unknown domain {value!r}. Must be one of: {valid}"
            ) from None


class ScoreFactor(str, Enum):
    """The two independent per-artisan opinions. Never combined."""

    ELITE = "elite"
    PROVENANCE = "provenance"

    @property
    def column(self) -> str:
        return f"{self.value}_factor"


@dataclass
class ArtisanRecord:
    """A persisted artisan from the artisans table.

    Attributes:
        code: Unique artisan code (e.g. ``MAS590``).
        domain: Population the artisan is ranked within.
        elite_count: Designated works in the elite tiers.
        total_count: All designated works, elite or not.
        elite_factor: Cached elite factor, None until first computed.
        provenance: Cached provenance aggregates.
        updated_at: Last write timestamp.
    """

    code: str
    domain: str
    elite_count: int = 0
    total_count: int = 0
    elite_factor: float | None = None
    provenance: ArtisanProvenanceSummary = field(default_factory=ArtisanProvenanceSummary)
    updated_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def __post_init__(self) -> None:
        if not self.code:
            raise ValueError("code must be non-empty")
        self.domain = ArtisanDomain.parse(self.domain).value
        if self.total_count < 0:
            raise EliteCountError(
                "total_count must be non-negative",
                artisan_code=self.code,
                elite_count=self.elite_count,
                total_count=self.total_count,
            )
        if self.elite_count < 0:
            raise EliteCountError(
                "elite_count must be non-negative",
                artisan_code=self.code,
                elite_count=self.elite_count,
                total_count=self.total_count,
            )
        if self.elite_count > self.total_count:
            raise EliteCountError(
                "elite_count cannot exceed total_count",
                artisan_code=self.code,
                elite_count=self.elite_count,
                total_count=self.total_count,
            )

    @property
    def provenance_factor(self) -> float:
        return self.provenance.provenance_factor


@dataclass(frozen=True)
class ArtisanScores:
    """Derived factors for one artisan, written back atomically.

    A factor whose inputs were rejected is None and its stored columns are
    left untouched; the other factor is still written.

    Attributes:
        code: Artisan code.
        elite_factor: Rounded elite factor, None if rejected.
        provenance: Provenance summary including the rounded factor, None if rejected.
        rejected: Invariant violations that caused a factor to be withheld.
    """

    code: str
    elite_factor: float | None
    provenance: ArtisanProvenanceSummary | None
    rejected: tuple[InvariantViolationError, ...] = field(default=(), compare=False)

    @property
    def provenance_factor(self) -> float | None:
        if self.provenance is None:
            return None
        return self.provenance.provenance_factor

    @property
    def is_empty(self) -> bool:
        return self.elite_factor is None and self.provenance is None

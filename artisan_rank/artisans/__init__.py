"""Artisan records and their persistence.

Components:
- ArtisanDomain: Ranking populations (smith / fitting-maker)
- ScoreFactor: The two independent factors (elite / provenance)
- ArtisanRecord: Dataclass mapping to the artisans table
- ArtisanScores: Derived factors written back per artisan
- ArtisanRepository: asyncpg CRUD for counters, observations, and factors
"""

from artisan_rank.artisans.repository import ArtisanRepository
from artisan_rank.artisans.schemas import (
    ArtisanDomain,
    ArtisanRecord,
    ArtisanScores,
    ScoreFactor,
)

__all__ = [
    "ArtisanDomain",
    "ArtisanRecord",
    "ArtisanRepository",
    "ArtisanScores",
    "ScoreFactor",
]

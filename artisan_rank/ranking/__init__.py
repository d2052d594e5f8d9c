"""Within-domain percentiles, ranks, and grades.

Components:
- RankingConfig: Pydantic settings (RANKING_* env vars)
- Grade / RankEntry / PercentileSnapshot: Ranked output
- PercentileService: Stateless ranking + cached async snapshots
"""

from artisan_rank.ranking.config import RankingConfig
from artisan_rank.ranking.schemas import Grade, PercentileSnapshot, RankEntry
from artisan_rank.ranking.service import PercentileService

__all__ = [
    "Grade",
    "PercentileService",
    "PercentileSnapshot",
    "RankEntry",
    "RankingConfig",
]

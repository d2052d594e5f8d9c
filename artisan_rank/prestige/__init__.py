"""Historical-owner prestige tiers.

Components:
- PrestigeTier: Enum of owner categories with their fixed scores
- PrestigeTierTable: Immutable group/member/override lookup
- PrestigeTierResolver: Exact-match resolution with a default floor
"""

from artisan_rank.prestige.resolver import PrestigeTierResolver
from artisan_rank.prestige.schemas import (
    MAX_PRESTIGE_SCORE,
    MIN_PRESTIGE_SCORE,
    TIER_SCORES,
    PrestigeTier,
)
from artisan_rank.prestige.table import PrestigeTierTable, default_prestige_table

__all__ = [
    "MAX_PRESTIGE_SCORE",
    "MIN_PRESTIGE_SCORE",
    "TIER_SCORES",
    "PrestigeTier",
    "PrestigeTierResolver",
    "PrestigeTierTable",
    "default_prestige_table",
]

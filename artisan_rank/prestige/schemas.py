"""Schema definitions for historical-owner prestige tiers."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType


class PrestigeTier(str, Enum):
    """Category of historical owner, ordered from most to least prestigious."""

    IMPERIAL = "imperial"
    SHOGUNAL = "shogunal"
    PREMIER_DAIMYO = "premier_daimyo"
    MAJOR_DAIMYO = "major_daimyo"
    OTHER_DAIMYO = "other_daimyo"
    ZAIBATSU = "zaibatsu"
    INSTITUTION = "institution"
    NAMED_COLLECTOR = "named_collector"

    @property
    def score(self) -> float:
        """Numeric prestige score for this tier."""
        return TIER_SCORES[self]

    @classmethod
    def for_score(cls, score: float) -> PrestigeTier:
        """Return the highest tier whose score does not exceed ``score``.

        Scores below the Named Collector floor still map to Named Collector.
        """
        for tier in cls:
            if score >= TIER_SCORES[tier]:
                return tier
        return cls.NAMED_COLLECTOR


TIER_SCORES: MappingProxyType[PrestigeTier, float] = MappingProxyType({
    PrestigeTier.IMPERIAL: 10.0,
    PrestigeTier.SHOGUNAL: 9.0,
    PrestigeTier.PREMIER_DAIMYO: 8.0,
    PrestigeTier.MAJOR_DAIMYO: 6.0,
    PrestigeTier.OTHER_DAIMYO: 4.0,
    PrestigeTier.ZAIBATSU: 3.5,
    PrestigeTier.INSTITUTION: 3.0,
    PrestigeTier.NAMED_COLLECTOR: 2.0,
})

MIN_PRESTIGE_SCORE = TIER_SCORES[PrestigeTier.NAMED_COLLECTOR]
MAX_PRESTIGE_SCORE = TIER_SCORES[PrestigeTier.IMPERIAL]

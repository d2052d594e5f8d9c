"""Deterministic owner-identity to prestige-score resolution."""

from __future__ import annotations

import logging

from artisan_rank.prestige.schemas import PrestigeTier
from artisan_rank.prestige.table import PrestigeTierTable, default_prestige_table

logger = logging.getLogger(__name__)


class PrestigeTierResolver:
    """Resolve canonical owner identities to prestige scores.

    Resolution order is exact match only:
      1. individual map (family members, explicit overrides)
      2. group/category map
      3. the table's default (Named Collector floor)

    Unknown identities are never an error. There is no fuzzy matching, so
    re-resolving unchanged inputs always yields the same scores.

    Usage:
        resolver = PrestigeTierResolver(table)
        resolver.resolve("Maeda Family")      # 8.0
        resolver.resolve("Tokugawa Iemitsu")  # 9.0 (inherits shogunal house)
    """

    def __init__(self, table: PrestigeTierTable | None = None) -> None:
        self._table = table if table is not None else default_prestige_table()

    @property
    def table(self) -> PrestigeTierTable:
        return self._table

    def resolve(self, owner_identity: str) -> float:
        """Return the prestige score for a normalized owner identity."""
        score = self._table.individual_score(owner_identity)
        if score is not None:
            return score

        tier = self._table.group_tier(owner_identity)
        if tier is not None:
            return tier.score

        logger.debug("No prestige entry for %r, using default", owner_identity)
        return self._table.default_score

    def resolve_tier(self, owner_identity: str) -> PrestigeTier:
        """Return the display tier for an owner identity.

        Overridden individuals are bucketed by their overridden score.
        """
        return PrestigeTier.for_score(self.resolve(owner_identity))

"""Provenance factor from prestige-scored historical ownership.

Components:
- ProvenanceConfig: Pydantic settings for the pseudo-observation prior
- ProvenanceObservation: One scored owner with its work multiplicity
- ArtisanProvenanceSummary: Cached n / sum / sum-of-squares / apex aggregates
- ProvenanceFactorEstimator: Lower credible bound of mean prestige
- aggregate_owner_counts: Per-work owner lists to (owner, count) pairs
"""

from artisan_rank.provenance.config import ProvenanceConfig
from artisan_rank.provenance.schemas import (
    ArtisanProvenanceSummary,
    ProvenanceObservation,
)
from artisan_rank.provenance.service import (
    ProvenanceFactorEstimator,
    aggregate_owner_counts,
)

__all__ = [
    "ArtisanProvenanceSummary",
    "ProvenanceConfig",
    "ProvenanceFactorEstimator",
    "ProvenanceObservation",
    "aggregate_owner_counts",
]

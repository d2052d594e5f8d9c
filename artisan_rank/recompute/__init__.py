"""Recompute entry points for per-artisan factors.

Components:
- RecomputeConfig: Pydantic settings (RECOMPUTE_* env vars)
- RecomputeResult: Counts, failures, and checkpoint of a run
- RecomputeService: Targeted and full-sweep recomputes
"""

from artisan_rank.recompute.config import RecomputeConfig
from artisan_rank.recompute.schemas import RecomputeResult
from artisan_rank.recompute.service import RecomputeService

__all__ = [
    "RecomputeConfig",
    "RecomputeResult",
    "RecomputeService",
]

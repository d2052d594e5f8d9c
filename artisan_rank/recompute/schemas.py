"""Schema definitions for recompute runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

RecomputeScope = Literal["all", "codes"]


@dataclass
class RecomputeResult:
    """Summary of a recompute run.

    Attributes:
        scope: ``all`` for a full sweep, ``codes`` for a targeted run.
        requested: Codes the run attempted (after de-duplication).
        updated: Artisans with at least one factor written.
        not_found: Requested codes with no artisan record.
        failed: Codes with a rejected factor or a failed write.
        errors: Human-readable error descriptions.
        checkpoint: Last code of the fully processed prefix (full sweeps).
        completed: False when a full sweep stopped early.
        elapsed_seconds: Wall time of the run.
    """

    scope: RecomputeScope
    requested: int = 0
    updated: int = 0
    not_found: int = 0
    failed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    checkpoint: str | None = None
    completed: bool = True
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.completed and not self.failed

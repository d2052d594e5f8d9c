"""Exceptions raised by the scoring engine.

Only invariant violations surface to callers; degenerate-but-valid inputs
(zero works, zero observations, tiny populations) always produce a score.
"""

from __future__ import annotations

from typing import Any


class InvariantViolationError(ValueError):
    """Raised when upstream aggregates break a counting invariant.

    Carries the artisan code (when known) and the offending values so the
    upstream aggregation layer can locate and correct the record.
    """

    def __init__(
        self,
        message: str,
        *,
        artisan_code: str | None = None,
        **values: Any,
    ) -> None:
        self.artisan_code = artisan_code
        self.reason = message
        self.values = values
        context = ", ".join(f"{k}={v!r}" for k, v in values.items())
        prefix = f"[{artisan_code}] " if artisan_code else ""
        super().__init__(f"{prefix}{message} ({context})" if context else f"{prefix}{message}")

    def with_code(self, artisan_code: str) -> InvariantViolationError:
        """Return a copy of this error attributed to ``artisan_code``."""
        return type(self)(self.reason, artisan_code=artisan_code, **self.values)


class EliteCountError(InvariantViolationError):
    """``elite_count``/``total_count`` are negative or inconsistent."""


class ProvenanceAggregateError(InvariantViolationError):
    """Provenance aggregates (n, sum, sum of squares) are inconsistent."""


class InvalidScoreError(ValueError):
    """A score handed to the percentile service is NaN or infinite."""


class UnknownDomainError(ValueError):
    """A domain tag is not one of the known artisan domains."""

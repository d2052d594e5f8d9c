"""Artisan repository for the record store.

Follows the asyncpg repository pattern: SQL constants at module level,
a thin class over ``Database``, and a row-to-dataclass converter. Each
artisan's derived factors are written in a single UPDATE so concurrent
recomputes of the same code are last-writer-wins and never interleave.
"""

import json
import logging
from typing import Any

from artisan_rank.artisans.schemas import (
    ArtisanDomain,
    ArtisanRecord,
    ArtisanScores,
    ScoreFactor,
)
from artisan_rank.elite.service import EliteFactorEstimator
from artisan_rank.provenance.schemas import ArtisanProvenanceSummary
from artisan_rank.storage.database import Database

logger = logging.getLogger(__name__)

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS artisans (
    code              TEXT PRIMARY KEY,
    domain            TEXT NOT NULL,
    elite_count       INTEGER NOT NULL DEFAULT 0,
    total_count       INTEGER NOT NULL DEFAULT 0,
    elite_factor      DOUBLE PRECISION,
    provenance_count  INTEGER NOT NULL DEFAULT 0,
    provenance_sum    DOUBLE PRECISION NOT NULL DEFAULT 0,
    provenance_sum_sq DOUBLE PRECISION NOT NULL DEFAULT 0,
    provenance_apex   DOUBLE PRECISION NOT NULL DEFAULT 0,
    provenance_factor DOUBLE PRECISION,
    provenance_tiers  JSONB NOT NULL DEFAULT '{}',
    updated_at        TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT artisans_counts_check
        CHECK (elite_count >= 0 AND elite_count <= total_count)
);

CREATE INDEX IF NOT EXISTS idx_artisans_domain_elite
    ON artisans(domain, elite_factor DESC);
CREATE INDEX IF NOT EXISTS idx_artisans_domain_provenance
    ON artisans(domain, provenance_factor DESC);

CREATE TABLE IF NOT EXISTS provenance_observations (
    code   TEXT NOT NULL REFERENCES artisans(code) ON DELETE CASCADE,
    owner  TEXT NOT NULL,
    works  INTEGER NOT NULL CHECK (works > 0),
    PRIMARY KEY (code, owner)
);
"""

_UPSERT_SQL = """
INSERT INTO artisans (code, domain, elite_count, total_count, elite_factor, updated_at)
VALUES ($1, $2, $3, $4, $5, NOW())
ON CONFLICT (code) DO UPDATE SET
    domain = EXCLUDED.domain,
    elite_count = EXCLUDED.elite_count,
    total_count = EXCLUDED.total_count,
    elite_factor = EXCLUDED.elite_factor,
    updated_at = NOW()
RETURNING *
"""

_SAVE_SCORES_SQL = """
UPDATE artisans SET
    provenance_count = $2,
    provenance_sum = $3,
    provenance_sum_sq = $4,
    provenance_apex = $5,
    provenance_factor = $6,
    provenance_tiers = $7::jsonb,
    elite_factor = $8,
    updated_at = NOW()
WHERE code = $1
"""

# Same statement without the elite column, for a rejected elite input
_SAVE_PROVENANCE_SQL = """
UPDATE artisans SET
    provenance_count = $2,
    provenance_sum = $3,
    provenance_sum_sq = $4,
    provenance_apex = $5,
    provenance_factor = $6,
    provenance_tiers = $7::jsonb,
    updated_at = NOW()
WHERE code = $1
"""

_SAVE_ELITE_SQL = """
UPDATE artisans SET elite_factor = $2, updated_at = NOW()
WHERE code = $1
"""

_UPDATE_COUNTS_SQL = """
UPDATE artisans SET
    elite_count = $2,
    total_count = $3,
    elite_factor = $4,
    updated_at = NOW()
WHERE code = $1
"""

_LIST_SCORES_SQL = {
    ScoreFactor.ELITE: """
        SELECT code, elite_factor AS score FROM artisans
        WHERE domain = $1 AND total_count >= $2 AND elite_factor IS NOT NULL
    """,
    ScoreFactor.PROVENANCE: """
        SELECT code, provenance_factor AS score FROM artisans
        WHERE domain = $1 AND provenance_count >= $2 AND provenance_factor IS NOT NULL
    """,
}


class ArtisanRepository:
    """Repository for artisan counters, observations, and cached factors."""

    def __init__(
        self,
        database: Database,
        elite: EliteFactorEstimator | None = None,
    ) -> None:
        self._db = database
        self._elite = elite or EliteFactorEstimator()

    async def create_tables(self) -> None:
        """Create the artisans and provenance_observations tables (idempotent)."""
        await self._db.execute(_CREATE_TABLES_SQL)
        logger.info("Artisan tables ensured")

    async def get(self, code: str) -> ArtisanRecord | None:
        """Retrieve an artisan by code."""
        row = await self._db.fetchrow("SELECT * FROM artisans WHERE code = $1", code)
        if row is None:
            return None
        return _row_to_record(row)

    async def get_batch(self, codes: list[str]) -> dict[str, ArtisanRecord]:
        """Retrieve multiple artisans. Unknown codes are absent from the result."""
        if not codes:
            return {}
        rows = await self._db.fetch(
            "SELECT * FROM artisans WHERE code = ANY($1::text[])", list(codes)
        )
        return {row["code"]: _row_to_record(row) for row in rows}

    async def upsert(self, record: ArtisanRecord) -> ArtisanRecord:
        """Insert or update an artisan's domain and counters.

        The elite factor is refreshed from the new counters; provenance
        columns are left for recompute.
        """
        row = await self._db.fetchrow(
            _UPSERT_SQL,
            record.code,
            record.domain,
            record.elite_count,
            record.total_count,
            self._elite.score(
                record.elite_count, record.total_count, artisan_code=record.code
            ),
        )
        return _row_to_record(row)

    async def update_counts(self, code: str, elite_count: int, total_count: int) -> bool:
        """Overwrite an artisan's counters after an upstream mutation.

        The elite factor is a pure function of the counters, so it is
        recomputed and written in the same statement.

        Raises:
            EliteCountError: If the counts break ``0 <= elite <= total``.

        Returns:
            True if the artisan existed.
        """
        elite_factor = self._elite.score(elite_count, total_count, artisan_code=code)
        status = await self._db.execute(
            _UPDATE_COUNTS_SQL, code, elite_count, total_count, elite_factor
        )
        return status.endswith(" 1")

    async def list_codes(
        self,
        *,
        domain: str | None = None,
        after: str | None = None,
        limit: int = 100,
    ) -> list[str]:
        """List artisan codes in ascending order after a keyset cursor.

        Args:
            domain: Optional domain filter.
            after: Exclusive lower bound (a checkpoint), None to start at the top.
            limit: Page size.
        """
        conditions = ["($1::text IS NULL OR code > $1)"]
        params: list[Any] = [after]
        if domain is not None:
            params.append(ArtisanDomain.parse(domain).value)
            conditions.append(f"domain = ${len(params)}")
        params.append(limit)
        sql = (
            f"SELECT code FROM artisans WHERE {' AND '.join(conditions)} "
            f"ORDER BY code LIMIT ${len(params)}"
        )
        rows = await self._db.fetch(sql, *params)
        return [row["code"] for row in rows]

    async def get_owner_counts(self, code: str) -> list[tuple[str, int]]:
        """Return an artisan's (owner, works) observation pairs."""
        rows = await self._db.fetch(
            "SELECT owner, works FROM provenance_observations WHERE code = $1 ORDER BY owner",
            code,
        )
        return [(row["owner"], row["works"]) for row in rows]

    async def get_owner_counts_batch(
        self, codes: list[str]
    ) -> dict[str, list[tuple[str, int]]]:
        """Return observation pairs for several artisans keyed by code."""
        if not codes:
            return {}
        rows = await self._db.fetch(
            "SELECT code, owner, works FROM provenance_observations "
            "WHERE code = ANY($1::text[]) ORDER BY code, owner",
            list(codes),
        )
        result: dict[str, list[tuple[str, int]]] = {}
        for row in rows:
            result.setdefault(row["code"], []).append((row["owner"], row["works"]))
        return result

    async def replace_owner_counts(
        self, code: str, owner_counts: list[tuple[str, int]]
    ) -> int:
        """Replace an artisan's full observation set in one transaction.

        Returns:
            Number of observation rows written.
        """
        merged: dict[str, int] = {}
        for owner, works in owner_counts:
            if works < 1:
                raise ValueError(f"works must be positive for owner {owner!r}, got {works}")
            merged[owner] = merged.get(owner, 0) + works

        async with self._db.transaction() as conn:
            await conn.execute(
                "DELETE FROM provenance_observations WHERE code = $1", code
            )
            if merged:
                await conn.executemany(
                    "INSERT INTO provenance_observations (code, owner, works) "
                    "VALUES ($1, $2, $3)",
                    [(code, owner, works) for owner, works in merged.items()],
                )
        logger.debug("Replaced %d observations for %s", len(merged), code)
        return len(merged)

    async def save_scores(self, scores: ArtisanScores) -> bool:
        """Write one artisan's derived factors in a single statement.

        A factor set to None keeps its stored columns.

        Raises:
            ValueError: If neither factor is present.

        Returns:
            True if the artisan existed.
        """
        summary = scores.provenance
        if summary is None:
            if scores.elite_factor is None:
                raise ValueError(f"No factors to save for {scores.code!r}")
            status = await self._db.execute(_SAVE_ELITE_SQL, scores.code, scores.elite_factor)
        elif scores.elite_factor is None:
            status = await self._db.execute(
                _SAVE_PROVENANCE_SQL, scores.code, *_provenance_params(summary)
            )
        else:
            status = await self._db.execute(
                _SAVE_SCORES_SQL,
                scores.code,
                *_provenance_params(summary),
                scores.elite_factor,
            )
        return status.endswith(" 1")

    async def list_scores(
        self,
        domain: str,
        factor: ScoreFactor,
        *,
        min_count: int = 1,
    ) -> dict[str, float]:
        """Return {code: factor} for one domain's rankable population.

        Elite ranking requires ``total_count >= min_count``; provenance ranking
        requires ``provenance_count >= min_count``.
        """
        rows = await self._db.fetch(
            _LIST_SCORES_SQL[ScoreFactor(factor)],
            ArtisanDomain.parse(domain).value,
            min_count,
        )
        return {row["code"]: float(row["score"]) for row in rows}

    async def count(self, domain: str | None = None) -> int:
        """Count artisans, optionally within one domain."""
        if domain is not None:
            return await self._db.fetchval(
                "SELECT COUNT(*) FROM artisans WHERE domain = $1",
                ArtisanDomain.parse(domain).value,
            )
        return await self._db.fetchval("SELECT COUNT(*) FROM artisans")


def _provenance_params(summary: ArtisanProvenanceSummary) -> tuple[Any, ...]:
    return (
        summary.n,
        summary.sum_scores,
        summary.sum_sq_scores,
        summary.apex,
        summary.provenance_factor,
        json.dumps(summary.tier_counts, sort_keys=True),
    )


def _row_to_record(row: Any) -> ArtisanRecord:
    """Convert an asyncpg Record to an ArtisanRecord."""
    tiers = row["provenance_tiers"]
    if isinstance(tiers, str):
        tiers = json.loads(tiers)

    provenance_factor = row["provenance_factor"]
    return ArtisanRecord(
        code=row["code"],
        domain=row["domain"],
        elite_count=row["elite_count"],
        total_count=row["total_count"],
        elite_factor=row["elite_factor"],
        provenance=ArtisanProvenanceSummary(
            n=row["provenance_count"],
            sum_scores=row["provenance_sum"],
            sum_sq_scores=row["provenance_sum_sq"],
            apex=row["provenance_apex"],
            provenance_factor=provenance_factor if provenance_factor is not None else 0.0,
            tier_counts=dict(tiers or {}),
        ),
        updated_at=row["updated_at"],
    )

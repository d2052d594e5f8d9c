"""Tests for artisan schemas."""

import pytest

from artisan_rank.artisans.schemas import (
    ArtisanDomain,
    ArtisanRecord,
    ArtisanScores,
    ScoreFactor,
)
from artisan_rank.errors import EliteCountError, UnknownDomainError
from artisan_rank.provenance.schemas import ArtisanProvenanceSummary


class TestArtisanDomain:
    """Tests for domain parsing."""

    def test_parse_values(self):
        assert ArtisanDomain.parse("smith") == ArtisanDomain.SMITH
        assert ArtisanDomain.parse("fitting-maker") == ArtisanDomain.FITTING_MAKER

    def test_parse_enum_passthrough(self):
        assert ArtisanDomain.parse(ArtisanDomain.SMITH) is ArtisanDomain.SMITH

    def test_unknown_domain(self):
        with pytest.raises(UnknownDomainError, match="Unknown domain 'armorer'"):
            ArtisanDomain.parse("armorer")


class TestScoreFactor:
    def test_columns(self):
        assert ScoreFactor.ELITE.column == "elite_factor"
        assert ScoreFactor.PROVENANCE.column == "provenance_factor"


class TestArtisanRecord:
    """Tests for record construction and validation."""

    def test_defaults(self):
        record = ArtisanRecord(code="MAS590", domain="smith")
        assert record.elite_count == 0
        assert record.total_count == 0
        assert record.elite_factor is None
        assert record.provenance_factor == 0.0
        assert record.updated_at.tzinfo is not None

    def test_domain_normalized_from_enum(self):
        record = ArtisanRecord(code="GOT042", domain=ArtisanDomain.FITTING_MAKER)
        assert record.domain == "fitting-maker"

    def test_empty_code_rejected(self):
        with pytest.raises(ValueError, match="code"):
            ArtisanRecord(code="", domain="smith")

    def test_unknown_domain_rejected(self):
        with pytest.raises(UnknownDomainError):
            ArtisanRecord(code="MAS590", domain="potter")

    def test_elite_exceeding_total_rejected(self):
        with pytest.raises(EliteCountError) as exc_info:
            ArtisanRecord(code="MAS590", domain="smith", elite_count=4, total_count=3)
        assert exc_info.value.artisan_code == "MAS590"

    def test_negative_total_rejected(self):
        with pytest.raises(EliteCountError):
            ArtisanRecord(code="MAS590", domain="smith", total_count=-1)


class TestArtisanScores:
    def test_provenance_factor_passthrough(self):
        scores = ArtisanScores(
            code="MAS590",
            elite_factor=0.6388,
            provenance=ArtisanProvenanceSummary(n=3, provenance_factor=2.12),
        )
        assert scores.provenance_factor == 2.12
        assert not scores.is_empty
        assert scores.rejected == ()

    def test_withheld_provenance(self):
        error = EliteCountError("elite_count cannot exceed total_count", artisan_code="MAS590")
        scores = ArtisanScores(
            code="MAS590", elite_factor=None, provenance=None, rejected=(error,)
        )
        assert scores.provenance_factor is None
        assert scores.is_empty
        assert scores.rejected[0].artisan_code == "MAS590"

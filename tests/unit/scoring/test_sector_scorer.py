"""Tests for sector keyword scoring."""

from __future__ import annotations

import pytest

from cvmatch_agents.scoring.sector import SectorKeywordScorer

SECTORS: dict[str, tuple[str, ...]] = {
    "tech": ("python", "docker", "kubernetes", "react"),
    "finance": ("audit", "ifrs", "trading", "compliance"),
}


@pytest.fixture
def scorer() -> SectorKeywordScorer:
    """Scorer over a small two-sector table."""
    return SectorKeywordScorer(SECTORS)


@pytest.mark.unit
class TestSectorDetection:
    """Test sector ratios and detection."""

    def test_ratios(self, scorer: SectorKeywordScorer) -> None:
        """Ratio is the share of a sector's keywords present in the text."""
        ratios = scorer.sector_ratios("Python and Docker")
        assert ratios == {"tech": 0.5, "finance": 0.0}

    def test_detect_sector(self, scorer: SectorKeywordScorer) -> None:
        """The best-covered sector wins."""
        assert scorer.detect_sector("audit ifrs") == "finance"

    def test_tie_goes_to_first_sector(self, scorer: SectorKeywordScorer) -> None:
        """Empty text ties at zero and returns the first sector."""
        assert scorer.detect_sector("") == "tech"

    def test_weight_profile_default_table(self) -> None:
        """Default table maps detected sectors to coarse weighting profiles."""
        scorer = SectorKeywordScorer()
        assert scorer.weight_profile("") == "default"
        assert scorer.weight_profile("react typescript docker aws api graphql") == "tech"
        assert scorer.weight_profile("ifrs basel audit compliance") == "finance"


@pytest.mark.unit
class TestSectorScore:
    """Test exact and fuzzy sector scoring."""

    def test_fuzzy_match_counts_partially(self, scorer: SectorKeywordScorer) -> None:
        """A near-spelling counts 0.7 of an exact match."""
        score, matches = scorer.sector_score("python docker kubernete", "tech")

        assert score == pytest.approx(67.5)
        fuzzy = next(m for m in matches if m.keyword == "kubernetes")
        assert fuzzy.found
        assert fuzzy.similarity is not None and fuzzy.similarity < 1.0
        assert not next(m for m in matches if m.keyword == "react").found

    def test_unknown_sector_scores_zero(self, scorer: SectorKeywordScorer) -> None:
        """A sector outside the table scores 0 with no matches."""
        assert scorer.sector_score("python", "retail") == (0.0, [])

    def test_score_applies_alignment_bonus(self, scorer: SectorKeywordScorer) -> None:
        """The CV's best sector matching the job's sector boosts the score by 10%."""
        result = scorer.score("python docker kubernetes react", "python docker")

        assert result.sector_detected == "tech"
        assert result.score == 55
        assert result.coverage == 50
        assert result.sectorial_breakdown["finance"] == 0.0

    def test_score_without_alignment(self, scorer: SectorKeywordScorer) -> None:
        """No bonus when the CV leans towards another sector."""
        result = scorer.score("python docker", "python audit ifrs trading")

        assert result.sector_detected == "tech"
        assert result.score == 25

    def test_missing_and_suggestions(self, scorer: SectorKeywordScorer) -> None:
        """Missing keywords come back with a French section hint."""
        job = "python docker kubernetes react"
        cv = "python docker"

        assert scorer.missing_keywords(job, cv) == ["kubernetes", "react"]
        suggestions = scorer.suggest_improvements(job, cv)
        assert suggestions.missing_keywords == ["kubernetes", "react"]
        assert suggestions.suggested_sections == [
            "Ajouter des compétences en kubernetes, react"
        ]

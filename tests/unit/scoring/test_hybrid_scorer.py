"""Tests for hybrid scoring."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from cvmatch_agents.scoring.domain import DomainSkillScorer
from cvmatch_agents.scoring.factory import create_hybrid_scorer
from cvmatch_agents.scoring.hybrid import (
    HybridScorer,
    calibrate,
    calibrate_general,
    confidence,
    detect_job_sector,
    detect_profile_context,
    dominant_component,
    justification,
    transferability,
)
from cvmatch_agents.scoring.sector import SectorKeywordScorer
from cvmatch_agents.scoring.semantic import SemanticScorer
from cvmatch_agents.scoring.vector import VectorScorer
from cvmatch_core.models.scoring import HybridBreakdown, ProfileContext
from tests.mocks.mock_settings import make_settings
from tests.mocks.mock_tools import FakeEmbedder

JOB = (
    "Analyste risque de crédit senior. Modélisation Bâle, stress testing, "
    "reporting COREP. Python et SQL. Risk management in a banking environment."
)
CV_BANKING = (
    "Analyste risque senior en banque. Stress testing, modèles Bâle, COREP. "
    "Python, SQL, compliance et crédit."
)
CV_MARKETING = "Chargée de communication digitale. Réseaux sociaux, SEO, campagnes."


def _breakdown(
    vector: float, keyword: float, embedding: float, semantic: float
) -> HybridBreakdown:
    return HybridBreakdown(
        vector_score=vector,
        keyword_score=keyword,
        embedding_score=embedding,
        semantic_score=semantic,
    )


def _scorer(embedder: FakeEmbedder, focus: bool = True) -> HybridScorer:
    return HybridScorer(
        VectorScorer(),
        SectorKeywordScorer(),
        SemanticScorer(embedder),
        DomainSkillScorer(),
        banking_insurance_focus=focus,
    )


@pytest.mark.unit
class TestProfileContext:
    """Test profile context detection."""

    def test_finance_expert(self) -> None:
        """Most keyword hits pick the context; a director is an expert."""
        profile = detect_profile_context(
            "Directeur financier, audit et budget, contrôle de gestion"
        )
        assert profile.context == "finance"
        assert profile.experience_level == "expert"
        assert profile.domain_expertise == ["finance"]

    def test_no_keywords_is_general_mid(self) -> None:
        """Nothing recognizable falls back to a general mid-level profile."""
        profile = detect_profile_context("Peintre en bâtiment")
        assert profile.context == "general"
        assert profile.experience_level == "mid"

    def test_senior_checked_before_expert(self) -> None:
        """The first level with a marker wins."""
        assert detect_profile_context("Head of data, senior").experience_level == "senior"


@pytest.mark.unit
class TestTransferability:
    """Test cross-sector transferability."""

    def test_job_sector_detection(self) -> None:
        """Hint ratio identifies the job sector."""
        sector, ratio = detect_job_sector("risk banking finance credit")
        assert sector == "finance_banking"
        assert ratio == pytest.approx(0.5)

    def test_unclear_job_sector_uses_keyword_score(self) -> None:
        """Without a clear job sector the keyword score is used, capped at 0.4."""
        assert transferability("Poste polyvalent", "tech_fullstack", 25, 80, 80) == 0.25
        assert transferability("Poste polyvalent", "tech_fullstack", 90, 80, 80) == 0.4

    def test_same_sector_strong_profile_capped(self) -> None:
        """A strong profile in the job's own sector caps at 0.85."""
        job = "risk banking finance credit basel regulatory"
        assert transferability(job, "finance_banking", 50, 70, 80) == pytest.approx(0.85)

    def test_marketing_to_banking_floor(self) -> None:
        """Marketing profiles are halved for specialized sectors and floored at 0.1."""
        job = "risk banking finance credit basel regulatory"
        assert transferability(job, "marketing_digital", 10, 10, 10) == pytest.approx(0.1)


@pytest.mark.unit
class TestCalibration:
    """Test score calibration."""

    def test_general_calibration(self) -> None:
        """Piecewise stretch around the 20 and 35 thresholds."""
        assert calibrate_general(40) == pytest.approx(59.0)
        assert calibrate_general(25) == pytest.approx(36.5)
        assert calibrate_general(10) == pytest.approx(11.0)

    def test_excellent_profile_capped(self) -> None:
        """The top tier never exceeds 92."""
        breakdown = _breakdown(80, 80, 80, 80)
        assert calibrate(80, breakdown, "finance_banking", 0.85) == pytest.approx(92.0)

    def test_weak_profile_damped(self) -> None:
        """The lowest tier scales the base score down."""
        breakdown = _breakdown(5, 5, 5, 5)
        assert calibrate(5, breakdown, "marketing_digital", 0.1) == pytest.approx(4.25)

    def test_confidence_full_agreement(self) -> None:
        """Equal components plus both bonuses saturate at 100."""
        profile = ProfileContext(domain_expertise=["finance", "banking"])
        assert confidence(_breakdown(50, 50, 50, 50), profile) == 100

    def test_confidence_spread(self) -> None:
        """Zero components are ignored; spread lowers confidence."""
        assert confidence(_breakdown(80, 20, 0, 0), ProfileContext()) == 40

    def test_confidence_all_zero(self) -> None:
        """No signal means no confidence."""
        assert confidence(_breakdown(0, 0, 0, 0), ProfileContext()) == 0


@pytest.mark.unit
class TestExplanations:
    """Test French explanation helpers."""

    def test_dominant_component(self) -> None:
        """The highest component dominates; ties go to the later one."""
        assert dominant_component(_breakdown(10, 90, 10, 10)) == "keyword"
        assert dominant_component(_breakdown(50, 50, 50, 50)) == "embedding"

    def test_justification_levels(self) -> None:
        """The level word follows the final score."""
        assert "match excellent (75%)" in justification(75, ["A"], ["B"])
        assert "match faible (10%)" in justification(10, [], ["B"])
        assert "lacunes importantes : B" in justification(10, [], ["B"])


@pytest.mark.unit
class TestHybridScorer:
    """Test the combined hybrid scorer."""

    def test_context_weights_override_mode(self) -> None:
        """With the focus on, a finance profile uses the finance weights."""
        scorer = _scorer(FakeEmbedder())
        assert scorer.weights_for("balanced", "finance").keyword == 0.4
        assert scorer.weights_for("balanced", "general").keyword == 0.3

    def test_mode_weights_without_focus(self) -> None:
        """Without the focus, only the mode chooses the weights."""
        scorer = _scorer(FakeEmbedder(), focus=False)
        assert scorer.weights_for("fast", "finance").vector == 0.4

    def test_unknown_mode(self) -> None:
        """An unknown mode is rejected."""
        with pytest.raises(ValueError, match="Unknown scoring mode"):
            _scorer(FakeEmbedder()).weights_for("turbo", "general")  # type: ignore[arg-type]

    async def test_balanced_uses_embeddings(self) -> None:
        """Balanced mode embeds the texts and reports a bounded score."""
        embedder = FakeEmbedder()
        result = await _scorer(embedder).score(JOB, CV_BANKING)
        assert embedder.calls
        assert 0 <= result.final_score <= 100
        assert result.mode == "balanced"
        assert result.transferability is not None
        assert result.detailed_justification.startswith("Ce profil présente")

    async def test_fast_mode_skips_embeddings(self) -> None:
        """Fast mode approximates the embedding score from vector and keyword scores."""
        embedder = FakeEmbedder()
        result = await _scorer(embedder).score(JOB, CV_BANKING, mode="fast")
        assert embedder.calls == []
        breakdown = result.breakdown
        assert breakdown.embedding_score == pytest.approx(
            (breakdown.vector_score + breakdown.keyword_score) / 2
        )

    async def test_general_calibration_has_no_transferability(self) -> None:
        """Without the focus no transferability is computed."""
        result = await _scorer(FakeEmbedder(), focus=False).score(JOB, CV_BANKING)
        assert result.transferability is None

    async def test_batch_sorted_best_first(self) -> None:
        """Batch results come back by descending final score."""
        results = await _scorer(FakeEmbedder()).batch_score(JOB, [CV_MARKETING, CV_BANKING])
        scores = [r.final_score for r in results]
        assert len(results) == 2
        assert scores == sorted(scores, reverse=True)

    async def test_factory_wires_configured_embedder(self) -> None:
        """The factory builds every component around the configured embedder."""
        embedder = FakeEmbedder()
        with patch("cvmatch_agents.scoring.factory.create_embedder", return_value=embedder):
            scorer = create_hybrid_scorer(
                make_settings(), use_cache=False, banking_insurance_focus=False
            )

        result = await scorer.score(JOB, CV_BANKING, mode="comprehensive")
        assert embedder.calls
        assert result.transferability is None
        assert result.weights.embedding == 0.35

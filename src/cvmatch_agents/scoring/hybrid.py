"""Hybrid scoring: TF-IDF, sector keywords, embeddings and domain skills combined.

Component weights follow the performance mode, then the CV's dominant
profile context (management, finance, IT, banking, insurance) when the
banking/insurance focus is on. The weighted base score is then calibrated
by sector alignment and cross-sector transferability into the final score.
"""

from __future__ import annotations

import statistics
from typing import Literal

import structlog

from cvmatch_agents.scoring.domain import DomainSkillScorer
from cvmatch_agents.scoring.sector import SectorKeywordScorer
from cvmatch_agents.scoring.semantic import SemanticScorer
from cvmatch_agents.scoring.vector import VectorScorer
from cvmatch_core.constants import (
    DEFAULT_TRANSFERABILITY,
    EXPERIENCE_LEVEL_MARKERS,
    HYBRID_CONTEXT_WEIGHTS,
    HYBRID_MODE_WEIGHTS,
    JOB_SECTOR_HINTS,
    PROFILE_CONTEXT_KEYWORDS,
    SECTOR_TRANSFERABILITY,
    SPECIALIZED_SECTORS,
)
from cvmatch_core.models.scoring import (
    DomainSkillScoreResult,
    HybridBreakdown,
    HybridScoreResult,
    HybridWeights,
    KeywordScoreResult,
    ProfileContext,
)

logger = structlog.get_logger()

ScoringMode = Literal["fast", "balanced", "comprehensive"]


def detect_profile_context(cv_text: str) -> ProfileContext:
    """Dominant context, experience level and domains with at least two markers."""
    text = cv_text.lower()
    counts = {
        context: sum(1 for kw in keywords if kw in text)
        for context, keywords in PROFILE_CONTEXT_KEYWORDS.items()
    }

    primary = "general"
    best = 0
    for context, count in counts.items():
        if count > best:
            primary, best = context, count

    level = "mid"
    for candidate, markers in EXPERIENCE_LEVEL_MARKERS:
        if any(m in text for m in markers):
            level = candidate
            break

    return ProfileContext(
        context=primary,
        experience_level=level,  # type: ignore[arg-type]
        domain_expertise=[c for c, count in counts.items() if count >= 2],
    )


def sector_alignment(sector: str, keyword_score: float, semantic_score: float) -> float:
    """Keyword-driven alignment with bonuses for specialized or tech sectors, capped at 1."""
    alignment = keyword_score / 100
    if sector in SPECIALIZED_SECTORS and semantic_score >= 60:
        alignment += 0.2
    elif sector == "tech_fullstack" and keyword_score >= 40:
        alignment += 0.25
    return min(1.0, alignment)


def detect_job_sector(job_text: str) -> tuple[str, float]:
    """Job sector from short hint lists and its hit ratio; ``unknown`` below 20%."""
    text = job_text.lower()
    sector, best_matches, best_ratio = "unknown", 0, 0.0
    for candidate, hints in JOB_SECTOR_HINTS.items():
        matches = sum(1 for hint in hints if hint in text)
        ratio = matches / len(hints)
        if matches > best_matches and ratio >= 0.2:
            sector, best_matches, best_ratio = candidate, matches, ratio
    return sector, best_ratio


def transferability(
    job_text: str,
    candidate_sector: str,
    keyword_score: float,
    semantic_score: float,
    embedding_score: float,
) -> float:
    """How well a profile from candidate_sector transfers to the job's sector, in [0.1, 0.85]."""
    job_sector, ratio = detect_job_sector(job_text)
    if ratio < 0.3:
        return min(0.4, keyword_score / 100)

    base = SECTOR_TRANSFERABILITY.get(candidate_sector, {}).get(
        job_sector, DEFAULT_TRANSFERABILITY
    )
    factor = base

    strong_technical = embedding_score >= 70 and keyword_score >= 25
    relevant_experience = semantic_score >= 65
    keyword_overlap = keyword_score >= 30
    if strong_technical and relevant_experience:
        factor += 0.15
    elif strong_technical or (relevant_experience and keyword_overlap):
        factor += 0.08
    elif keyword_overlap and semantic_score >= 50:
        factor += 0.04

    if candidate_sector == "marketing_digital" and job_sector in SPECIALIZED_SECTORS:
        factor *= 0.5

    quality = (keyword_score + semantic_score) / 2
    if quality < 25:
        factor = min(factor, 0.4)
    elif quality < 40:
        factor = min(factor, 0.6)

    final = min(0.85, max(0.1, factor))
    logger.debug(
        "sector_transferability",
        candidate_sector=candidate_sector,
        job_sector=job_sector,
        base=base,
        quality=round(quality),
        factor=round(final, 2),
    )
    return final


def calibrate(
    base_score: float,
    breakdown: HybridBreakdown,
    sector: str,
    transfer: float,
) -> float:
    """Map the weighted base score onto the final scale by quality tier."""
    technical = breakdown.vector_score * 0.6 + breakdown.embedding_score * 0.4
    expertise = breakdown.keyword_score * 0.7 + breakdown.semantic_score * 0.3
    alignment = max(
        sector_alignment(sector, breakdown.keyword_score, breakdown.semantic_score),
        transfer * 0.6,
    )

    bonus = 1.0
    if transfer >= 0.7 and technical >= 50 and expertise >= 45:
        bonus = 1.08
    elif transfer >= 0.6 and technical >= 35 and expertise >= 30:
        bonus = 1.05

    if expertise >= 45 and technical >= 35 and alignment >= 0.65:
        if expertise >= 60 and technical >= 50:
            return min(92.0, (75 + (base_score - 40) * 1.8) * bonus)
        if expertise >= 45:
            return min(85.0, (65 + (base_score - 35) * 1.6) * bonus)
        return min(78.0, (55 + (base_score - 30) * 1.4) * bonus)
    if expertise >= 30 and technical >= 25 and alignment >= 0.45:
        if expertise >= 35:
            return (50 + (base_score - 25) * 1.3) * bonus
        return (40 + (base_score - 20) * 1.2) * bonus
    if expertise >= 20 and alignment >= 0.3:
        return (25 + (base_score - 15) * 1.1) * min(bonus, 1.05)
    return min(base_score * max(0.85, transfer), 30.0)


def calibrate_general(base_score: float) -> float:
    """Piecewise stretch used without the banking/insurance focus."""
    if base_score >= 35:
        return 50 + (base_score - 35) * 1.8
    if base_score >= 20:
        return 30 + (base_score - 20) * 1.3
    return base_score * 1.1


def confidence(breakdown: HybridBreakdown, profile: ProfileContext) -> int:
    """Agreement between non-zero components, plus context and completeness bonuses."""
    scores = [
        s
        for s in (
            breakdown.vector_score,
            breakdown.keyword_score,
            breakdown.embedding_score,
            breakdown.semantic_score,
        )
        if s > 0
    ]
    if not scores:
        return 0
    consistency = max(0.0, 100 - statistics.pstdev(scores) * 2)
    context_bonus = 10 if len(profile.domain_expertise) > 1 else 0
    completeness_bonus = 10 if len(scores) == 4 else 0
    return min(100, round(consistency + context_bonus + completeness_bonus))


def _found_keywords(keyword: KeywordScoreResult) -> list[str]:
    return [m.keyword for m in keyword.matching_keywords if m.found]


def _missing_keywords(keyword: KeywordScoreResult) -> list[str]:
    return [m.keyword for m in keyword.matching_keywords if not m.found]


def strengths(breakdown: HybridBreakdown, keyword: KeywordScoreResult) -> list[str]:
    """French strengths derived from the component scores."""
    found: list[str] = []
    if breakdown.vector_score >= 35:
        found.append("Vocabulaire technique très aligné avec le poste")
    elif breakdown.vector_score >= 20:
        found.append("Terminologie appropriée au domaine")

    if breakdown.keyword_score >= 40:
        top = _found_keywords(keyword)[:3]
        if top:
            found.append(f"Compétences clés confirmées : {', '.join(top)}")
    elif breakdown.keyword_score >= 25:
        found.append("Certaines compétences techniques requises")

    if breakdown.semantic_score >= 70:
        found.append("Expérience métier très pertinente")
    elif breakdown.semantic_score >= 50:
        found.append("Contexte professionnel adapté")

    if keyword.sector_detected in SPECIALIZED_SECTORS:
        found.append("Profil spécialisé banking/finance")
    return found


def weaknesses(breakdown: HybridBreakdown, keyword: KeywordScoreResult) -> list[str]:
    """French weaknesses derived from the component scores."""
    found: list[str] = []
    if breakdown.vector_score < 15:
        found.append("Vocabulaire technique insuffisant")
    elif breakdown.vector_score < 25:
        found.append("Terminologie à renforcer")

    if breakdown.keyword_score < 20:
        missing = _missing_keywords(keyword)[:3]
        if missing:
            found.append(f"Compétences manquantes : {', '.join(missing)}")
    elif breakdown.keyword_score < 35:
        found.append("Certaines compétences techniques à développer")

    if breakdown.semantic_score < 40:
        found.append("Expérience métier à renforcer")
    elif breakdown.semantic_score < 60:
        found.append("Contexte professionnel partiellement aligné")

    if keyword.sector_detected == "marketing_digital":
        found.append("Profil orienté marketing, reconversion nécessaire")
    elif keyword.sector_detected not in SPECIALIZED_SECTORS:
        found.append("Secteur d'activité peu aligné")
    return found


def recommendations(keyword: KeywordScoreResult, domain: DomainSkillScoreResult) -> list[str]:
    """Up to five distinct French recommendations."""
    hints = [f"Ajouter compétence en {kw}" for kw in _missing_keywords(keyword)[:3]]
    hints.extend(domain.recommendations)
    if keyword.score < 70:
        hints.append(f"Renforcer l'expérience en {keyword.sector_detected.replace('_', ' ', 1)}")
    return list(dict.fromkeys(hints))[:5]


def justification(final_score: int, found: list[str], lacking: list[str]) -> str:
    """One-paragraph French justification built from the top strengths and weaknesses."""
    if final_score >= 60:
        level = "excellent"
    elif final_score >= 40:
        level = "bon"
    elif final_score >= 25:
        level = "moyen"
    else:
        level = "faible"
    top_strengths, top_weaknesses = found[:2], lacking[:2]

    text = f"Ce profil présente un match {level} ({final_score}%) pour le poste. "
    if final_score >= 40:
        if top_strengths:
            text += f"Les points forts incluent {', '.join(top_strengths)}. "
        if top_weaknesses:
            text += f"Des améliorations seraient bénéfiques sur {' et '.join(top_weaknesses)}."
    else:
        if top_weaknesses:
            text += f"Le profil présente des lacunes importantes : {', '.join(top_weaknesses)}. "
        if top_strengths:
            text += (
                "Cependant, des éléments positifs sont identifiés : "
                f"{' et '.join(top_strengths)}."
            )
    return text.strip()


def dominant_component(breakdown: HybridBreakdown) -> str:
    """Component with the highest score; ties go to the later component."""
    scores = {
        "keyword": breakdown.keyword_score,
        "vector": breakdown.vector_score,
        "semantic": breakdown.semantic_score,
        "embedding": breakdown.embedding_score,
    }
    dominant = "keyword"
    for name, value in scores.items():
        if not scores[dominant] > value:
            dominant = name
    return dominant


def match_explanation(final_score: int, breakdown: HybridBreakdown, context: str) -> str:
    """French sentence naming the component that drove the score."""
    text = f"Le score de {final_score}% est principalement influencé par "
    dominant = dominant_component(breakdown)
    if dominant == "keyword":
        text += (
            f"l'analyse des compétences techniques ({breakdown.keyword_score:.0f}%), "
            "qui révèle une bonne adéquation avec les exigences du poste."
        )
    elif dominant == "vector":
        text += (
            f"la similarité textuelle ({breakdown.vector_score:.0f}%), "
            "indiquant un vocabulaire professionnel aligné."
        )
    elif dominant == "semantic":
        text += (
            f"l'analyse sémantique ({breakdown.semantic_score:.0f}%), "
            "qui détecte une expérience métier pertinente."
        )
    else:
        text += "une combinaison équilibrée des différents critères d'analyse."
    fit = "bien" if final_score >= 50 else "partiellement"
    return f"{text} Le profil {context} correspond {fit} aux attentes."


class HybridScorer:
    """Combine the four text scorers into one calibrated 0-100 score."""

    def __init__(
        self,
        vector_scorer: VectorScorer,
        sector_scorer: SectorKeywordScorer,
        semantic_scorer: SemanticScorer,
        domain_scorer: DomainSkillScorer,
        banking_insurance_focus: bool = True,
    ) -> None:
        """Initialize with component scorers and the calibration focus."""
        self.vector_scorer = vector_scorer
        self.sector_scorer = sector_scorer
        self.semantic_scorer = semantic_scorer
        self.domain_scorer = domain_scorer
        self.banking_insurance_focus = banking_insurance_focus

    def weights_for(self, mode: ScoringMode, context: str) -> HybridWeights:
        """Mode weights, replaced by the context's weights under the banking/insurance focus."""
        if mode not in HYBRID_MODE_WEIGHTS:
            msg = f"Unknown scoring mode: {mode}"
            raise ValueError(msg)
        weights = HYBRID_MODE_WEIGHTS[mode]
        if self.banking_insurance_focus:
            weights = HYBRID_CONTEXT_WEIGHTS.get(context, weights)
        return HybridWeights(**weights)

    async def score(
        self, job_text: str, cv_text: str, mode: ScoringMode = "balanced"
    ) -> HybridScoreResult:
        """Score one CV against one job."""
        profile = detect_profile_context(cv_text)
        weights = self.weights_for(mode, profile.context)

        vector = self.vector_scorer.score(job_text, cv_text)
        keyword = self.sector_scorer.score(job_text, cv_text)
        domain = self.domain_scorer.score(job_text, cv_text)
        conceptual: list[str] = []
        if mode == "fast":
            embedding_score = (vector.score + keyword.score) / 2
        else:
            embedding = await self.semantic_scorer.score(job_text, cv_text)
            embedding_score = float(embedding.score)
            conceptual = embedding.semantic_matches

        breakdown = HybridBreakdown(
            vector_score=vector.score,
            keyword_score=keyword.score,
            embedding_score=embedding_score,
            semantic_score=domain.score,
        )
        base = (
            breakdown.vector_score * weights.vector
            + breakdown.keyword_score * weights.keyword
            + breakdown.embedding_score * weights.embedding
            + breakdown.semantic_score * weights.semantic
        )

        transfer: float | None = None
        if self.banking_insurance_focus:
            transfer = transferability(
                job_text,
                keyword.sector_detected,
                breakdown.keyword_score,
                breakdown.semantic_score,
                breakdown.embedding_score,
            )
            transformed = calibrate(base, breakdown, keyword.sector_detected, transfer)
        else:
            transformed = calibrate_general(base)
        final = max(0, min(100, round(transformed)))

        found = strengths(breakdown, keyword)
        lacking = weaknesses(breakdown, keyword)
        result = HybridScoreResult(
            final_score=final,
            base_score=base,
            confidence=confidence(breakdown, profile),
            mode=mode,
            breakdown=breakdown,
            weights=weights,
            profile=profile,
            sector_detected=keyword.sector_detected,
            transferability=transfer,
            skills_alignment=_found_keywords(keyword),
            missing_competencies=domain.missing_competencies,
            recommendations=recommendations(keyword, domain),
            conceptual_matches=conceptual,
            strengths=found,
            weaknesses=lacking,
            detailed_justification=justification(final, found, lacking),
            match_explanation=match_explanation(final, breakdown, profile.context),
        )
        logger.info(
            "hybrid_score",
            mode=mode,
            context=profile.context,
            base=round(base),
            final=final,
            confidence=result.confidence,
        )
        return result

    async def batch_score(
        self, job_text: str, cv_texts: list[str], mode: ScoringMode = "balanced"
    ) -> list[HybridScoreResult]:
        """Score several CVs against one job, best first."""
        results = [await self.score(job_text, cv_text, mode) for cv_text in cv_texts]
        return sorted(results, key=lambda r: r.final_score, reverse=True)

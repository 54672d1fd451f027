"""Sector keyword scoring with exact and fuzzy matching."""

from __future__ import annotations

import structlog

from cvmatch_agents.tools.text import string_similarity
from cvmatch_core.constants import (
    FUZZY_MATCH_WEIGHT,
    FUZZY_WORD_THRESHOLD,
    SECTOR_ALIGNMENT_BONUS,
    SECTOR_KEYWORDS,
    SECTOR_WEIGHT_PROFILE,
    WEAK_MATCH_THRESHOLD,
)
from cvmatch_core.models.scoring import KeywordMatch, KeywordScoreResult, KeywordSuggestions

logger = structlog.get_logger()


class SectorKeywordScorer:
    """Score texts against the per-sector keyword tables."""

    def __init__(self, sectors: dict[str, tuple[str, ...]] | None = None) -> None:
        """Initialize with a sector -> keywords table."""
        self._sectors = sectors or SECTOR_KEYWORDS

    @property
    def sectors(self) -> list[str]:
        """Known sector names in table order."""
        return list(self._sectors)

    def sector_ratios(self, text: str) -> dict[str, float]:
        """Share of each sector's keywords found verbatim in the text."""
        lowered = text.lower()
        return {
            sector: (
                sum(1 for kw in keywords if kw in lowered) / len(keywords) if keywords else 0.0
            )
            for sector, keywords in self._sectors.items()
        }

    def detect_sector(self, text: str) -> str:
        """Return the sector whose keywords cover the text best.

        Ties go to the sector listed first.
        """
        ratios = self.sector_ratios(text)
        best = max(ratios, key=lambda s: ratios[s])
        logger.debug("sector_detected", sector=best, ratio=round(ratios[best], 3))
        return best

    def weight_profile(self, text: str) -> str:
        """Map the detected sector to a weighting profile: tech, finance or default."""
        ratios = self.sector_ratios(text)
        best = max(ratios, key=lambda s: ratios[s])
        if ratios[best] <= 0:
            return "default"
        return SECTOR_WEIGHT_PROFILE.get(best, "default")

    def sector_score(self, text: str, sector: str) -> tuple[float, list[KeywordMatch]]:
        """Score text against one sector's keywords, on a 0-100 scale."""
        keywords = self._sectors.get(sector, ())
        if not keywords:
            return 0.0, []

        lowered = text.lower()
        words = set(lowered.split())
        matches: list[KeywordMatch] = []
        exact = 0
        fuzzy = 0

        for keyword in keywords:
            if keyword in lowered:
                matches.append(KeywordMatch(keyword=keyword, found=True, similarity=1.0))
                exact += 1
                continue
            best = max((string_similarity(word, keyword) for word in words), default=0.0)
            if best > FUZZY_WORD_THRESHOLD:
                matches.append(KeywordMatch(keyword=keyword, found=True, similarity=best))
                fuzzy += 1
            else:
                matches.append(KeywordMatch(keyword=keyword, found=False))

        score = (exact + fuzzy * FUZZY_MATCH_WEIGHT) / len(keywords) * 100
        return min(100.0, score), matches

    def score(self, job_text: str, cv_text: str) -> KeywordScoreResult:
        """Score a CV against the sector detected in the job text."""
        job_sector = self.detect_sector(job_text)

        breakdown: dict[str, float] = {}
        job_sector_score = 0.0
        job_sector_matches: list[KeywordMatch] = []
        for sector in self._sectors:
            value, matches = self.sector_score(cv_text, sector)
            breakdown[sector] = value
            if sector == job_sector:
                job_sector_score, job_sector_matches = value, matches

        found = sum(1 for m in job_sector_matches if m.found)
        coverage = found / len(job_sector_matches) * 100 if job_sector_matches else 0.0

        cv_best_sector = max(breakdown, key=lambda s: breakdown[s])
        final = job_sector_score
        if cv_best_sector == job_sector:
            final = min(100.0, final * SECTOR_ALIGNMENT_BONUS)

        logger.debug(
            "sector_score",
            sector=job_sector,
            score=round(final, 1),
            coverage=round(coverage, 1),
            aligned=cv_best_sector == job_sector,
        )
        return KeywordScoreResult(
            score=round(final),
            sector_detected=job_sector,
            matching_keywords=job_sector_matches,
            sectorial_breakdown=breakdown,
            coverage=round(coverage),
        )

    def missing_keywords(self, job_text: str, cv_text: str, limit: int = 5) -> list[str]:
        """Keywords of the job's sector that the CV lacks."""
        _, matches = self.sector_score(cv_text, self.detect_sector(job_text))
        return [m.keyword for m in matches if not m.found][:limit]

    def suggest_improvements(self, job_text: str, cv_text: str) -> KeywordSuggestions:
        """Missing and weakly matched keywords plus section hints in French."""
        _, matches = self.sector_score(cv_text, self.detect_sector(job_text))
        missing = [m.keyword for m in matches if not m.found][:5]
        weak = [
            m.keyword
            for m in matches
            if m.found and m.similarity is not None and m.similarity < WEAK_MATCH_THRESHOLD
        ][:3]

        sections: list[str] = []
        if missing:
            sections.append(f"Ajouter des compétences en {', '.join(missing[:2])}")
        if weak:
            sections.append(f"Renforcer l'expérience en {weak[0]}")
        return KeywordSuggestions(
            missing_keywords=missing, weak_keywords=weak, suggested_sections=sections
        )

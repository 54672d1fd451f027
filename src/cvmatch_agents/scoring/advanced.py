"""Five-factor weighted CV/job scoring."""

from __future__ import annotations

import structlog

from cvmatch_agents.scoring.keywords import extract_weighted_keywords
from cvmatch_agents.scoring.sector import SectorKeywordScorer
from cvmatch_agents.scoring.semantic import SemanticScorer
from cvmatch_agents.tools.text import extract_keywords, string_similarity
from cvmatch_core.constants import (
    SCORING_WEIGHTS,
    SIMILAR_SKILL_THRESHOLD,
    SKILL_LEVEL_FACTORS,
    TRANSFERABLE_SKILL_THRESHOLD,
)
from cvmatch_core.models.cv import CVData, Skill
from cvmatch_core.models.job import JobData
from cvmatch_core.models.scoring import AdvancedScoring, WeightedKeyword

logger = structlog.get_logger()

EXPERIENCE_YEARS_SHARE = 0.6
EXPERIENCE_RELEVANCE_SHARE = 0.4
EXPERIENCE_RANGE_YEARS = 5.0


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def years_score(years: float, required_min: float, required_max: float | None = None) -> float:
    """Score years of experience against a required range.

    Inside the range scores 1, below scales linearly, above decays to 0.7.
    """
    if required_min <= 0:
        return 1.0
    upper = required_max if required_max is not None else required_min + EXPERIENCE_RANGE_YEARS
    if years < required_min:
        return clamp(years / required_min)
    if years <= upper:
        return 1.0
    return max(0.7, 1 - (years - upper) / 10)


def skill_match_strength(cv_skill: str, job_skill: str) -> float:
    """1.0 for the same name, 0.8 for a close name, 0.5 for a related one."""
    if cv_skill.strip().lower() == job_skill.strip().lower():
        return 1.0
    ratio = string_similarity(cv_skill, job_skill)
    if ratio > SIMILAR_SKILL_THRESHOLD:
        return 0.8
    if ratio > TRANSFERABLE_SKILL_THRESHOLD:
        return 0.5
    return 0.0


def _level_factor(skill: Skill) -> float:
    return SKILL_LEVEL_FACTORS.get(skill.level, SKILL_LEVEL_FACTORS[None])


class AdvancedScorer:
    """Combine semantic, keyword, experience, skills and sector sub-scores."""

    def __init__(
        self,
        semantic_scorer: SemanticScorer,
        sector_scorer: SectorKeywordScorer | None = None,
        weights: dict[str, float] | None = None,
    ) -> None:
        """Initialize with the scorers backing the semantic and sector factors."""
        self._semantic = semantic_scorer
        self._sector = sector_scorer or SectorKeywordScorer()
        self._weights = weights or SCORING_WEIGHTS

    async def semantic_similarity(self, cv: CVData, job: JobData) -> float:
        """Embedding similarity with concept bonus, in [0, 1]."""
        result = await self._semantic.score(job.full_text(), cv.full_text())
        return clamp(result.score / 100)

    def keyword_match(self, cv_text: str, weighted_keywords: list[WeightedKeyword]) -> float:
        """Share of total keyword weight present in the CV text."""
        total = sum(kw.weight for kw in weighted_keywords)
        if total <= 0:
            return 0.0
        lowered = cv_text.lower()
        found = sum(kw.weight for kw in weighted_keywords if kw.keyword.lower() in lowered)
        return clamp(found / total)

    def experience_relevance(self, cv: CVData, job: JobData) -> float:
        """Blend of years fit and keyword relevance of past roles."""
        required = job.parsed.experience_required or 0.0
        years = years_score(cv.content.total_years(), required)

        keywords = [k.lower() for k in (job.extracted_keywords or extract_keywords(job.description))]
        if not keywords:
            relevance = 1.0
        else:
            experience_text = " ".join(
                " ".join([exp.title, exp.description, *exp.achievements])
                for exp in cv.content.experiences
            ).lower()
            relevance = sum(1 for kw in keywords if kw in experience_text) / len(keywords)

        return clamp(EXPERIENCE_YEARS_SHARE * years + EXPERIENCE_RELEVANCE_SHARE * relevance)

    def skills_level(self, cv: CVData, job: JobData) -> float:
        """Average of best level-adjusted CV match for each required skill."""
        required = job.required_skills()
        if not required:
            return 1.0
        cv_skills = cv.content.skills
        if not cv_skills:
            return 0.0

        total = 0.0
        for job_skill in required:
            total += max(
                skill_match_strength(skill.name, job_skill) * _level_factor(skill)
                for skill in cv_skills
            )
        return clamp(total / len(required))

    def sector_alignment(self, cv_text: str, job_text: str) -> float:
        """Sector keyword score of the CV for the job's sector, in [0, 1]."""
        return clamp(self._sector.score(job_text, cv_text).score / 100)

    async def score(self, cv: CVData, job: JobData) -> AdvancedScoring:
        """Compute all five sub-scores and their weighted combination."""
        cv_text = cv.full_text()
        weighted = extract_weighted_keywords(job)

        sub_scores = {
            "semantic_similarity": await self.semantic_similarity(cv, job),
            "keyword_match": self.keyword_match(cv_text, weighted),
            "experience_relevance": self.experience_relevance(cv, job),
            "skills_level": self.skills_level(cv, job),
            "sector_alignment": self.sector_alignment(cv_text, job.full_text()),
        }
        overall = clamp(sum(self._weights[name] * value for name, value in sub_scores.items()))

        lowered = cv_text.lower()
        missing = [kw.keyword for kw in weighted if kw.keyword.lower() not in lowered]

        logger.info(
            "advanced_score",
            cv_id=cv.id,
            job_id=job.id,
            overall=round(overall, 3),
            **{name: round(value, 3) for name, value in sub_scores.items()},
        )
        return AdvancedScoring(
            **sub_scores,
            overall=overall,
            weighted_keywords=weighted,
            missing_keywords=missing,
        )

    async def score_text(
        self, text: str, job: JobData, base_cv: CVData | None = None
    ) -> AdvancedScoring:
        """Score a bare résumé text, reusing structured content from base_cv."""
        content = base_cv.content.model_copy(deep=True) if base_cv else None
        cv = CVData(raw_text=text) if content is None else CVData(raw_text=text, content=content)
        return await self.score(cv, job)

"""Multi-dimensional matching between two extracted-context records."""

from __future__ import annotations

import re

import structlog

from cvmatch_agents.scoring.advanced import clamp, years_score
from cvmatch_agents.scoring.sector import SectorKeywordScorer
from cvmatch_agents.tools.text import string_similarity
from cvmatch_core.constants import (
    DIPLOMA_EQUIVALENCES,
    MULTI_DIMENSIONAL_WEIGHTS,
    SENIORITY_LEVELS,
    SIMILAR_SKILL_THRESHOLD,
    SOFT_SKILL_FAMILIES,
    TECH_SKILL_FAMILIES,
    TRANSFERABLE_SKILL_THRESHOLD,
)
from cvmatch_core.models.extraction import (
    CompanyInfo,
    Culture,
    EducationInfo,
    ExperienceInfo,
    FrenchExtractedData,
    HardSkill,
    SoftSkill,
)
from cvmatch_core.models.scoring import (
    CulturalMatchResult,
    EducationMatchResult,
    ExperienceMatchResult,
    MatchBreakdown,
    MatchRecommendation,
    MultiDimensionalScore,
    SimilarSkill,
    SkillMatchResult,
    SoftSkillMatchResult,
    TransferableSkill,
)

logger = structlog.get_logger()

_BAC_LEVEL_RE = re.compile(r"bac\s*\+\s*(\d+)", re.IGNORECASE)


def diploma_level(text: str) -> int:
    """Bac+N level of a diploma name or level string, 0 if unknown."""
    if not text:
        return 0
    for pattern, level in DIPLOMA_EQUIVALENCES:
        if re.search(pattern, text, re.IGNORECASE):
            return level
    match = _BAC_LEVEL_RE.search(text)
    return int(match.group(1)) if match else 0


def education_level(education: EducationInfo) -> int:
    """Bac+N level from the explicit level, falling back to the diploma name."""
    match = _BAC_LEVEL_RE.search(education.level)
    if match:
        return int(match.group(1))
    return diploma_level(education.diploma)


def set_similarity(a: list[str], b: list[str]) -> float:
    """Case-insensitive Jaccard index; two empty lists are identical."""
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    left = {s.lower() for s in a}
    right = {s.lower() for s in b}
    return len(left & right) / len(left | right)


def explain_transferability(cv_skill: str, job_skill: str) -> str:
    """Short French explanation of why a CV skill carries over."""
    family = TECH_SKILL_FAMILIES.get(job_skill, ())
    if cv_skill in family:
        return (
            f"Compétence transférable : {cv_skill} et {job_skill} "
            "sont des technologies similaires"
        )
    return f"Compétence transférable : {cv_skill} peut être adapté vers {job_skill}"


def seniority_match(cv_level: str, job_level: str) -> float:
    """1 when the CV is at least as senior; 0.2 off per missing level."""
    if cv_level not in SENIORITY_LEVELS or job_level not in SENIORITY_LEVELS:
        return 0.5
    gap = SENIORITY_LEVELS.index(job_level) - SENIORITY_LEVELS.index(cv_level)
    if gap <= 0:
        return 1.0
    return max(0.0, 1 - gap * 0.2)


def company_type_match(companies: list[CompanyInfo], preferred: list[str]) -> float:
    """Share of past employers whose type the job prefers."""
    if not preferred:
        return 1.0
    types = [c.type for c in companies]
    matched = sum(1 for t in types if t in preferred)
    return matched / max(len(types), len(preferred))


class MultiDimensionalMatcher:
    """Compare a CV and a job across six weighted dimensions."""

    def __init__(
        self,
        weights: dict[str, dict[str, float]] | None = None,
        sector_scorer: SectorKeywordScorer | None = None,
    ) -> None:
        """Initialize with per-sector weight profiles."""
        self._weights = weights or MULTI_DIMENSIONAL_WEIGHTS
        self._sector = sector_scorer or SectorKeywordScorer()

    def match(
        self,
        cv: FrenchExtractedData,
        job: FrenchExtractedData,
        authenticity: float = 0.5,
        sector: str | None = None,
    ) -> MultiDimensionalScore:
        """Score cv against job and derive recommendations."""
        profile = sector or self.detect_profile(job)
        weights = self._weights.get(profile, self._weights["default"])

        breakdown = MatchBreakdown(
            technical=self.match_technical(cv.hard_skills, job.hard_skills),
            experience=self.match_experience(cv.experience, job.experience),
            education=self.match_education(cv.education, job.education),
            soft_skills=self.match_soft_skills(cv.soft_skills, job.soft_skills),
            cultural=self.match_culture(cv.culture, job.culture),
            authenticity=clamp(authenticity),
        )
        scores = {
            "technical": breakdown.technical.score,
            "experience": breakdown.experience.score,
            "education": breakdown.education.score,
            "soft_skills": breakdown.soft_skills.score,
            "cultural": breakdown.cultural.score,
            "authenticity": breakdown.authenticity,
        }
        total_weight = sum(weights.get(k, 0.0) for k in scores)
        weighted = sum(value * weights.get(k, 0.0) for k, value in scores.items())
        overall = clamp(weighted / total_weight) if total_weight > 0 else 0.0

        logger.info("multi_dimensional_match", sector=profile, overall=round(overall, 3))
        return MultiDimensionalScore(
            overall=overall,
            sector=profile,
            breakdown=breakdown,
            weights=dict(weights),
            recommendations=self.recommendations(breakdown),
        )

    def detect_profile(self, job: FrenchExtractedData) -> str:
        """Pick the weighting profile from the job's skills and education."""
        parts = [s.name for s in job.hard_skills]
        parts.extend(t.name for t in job.tools)
        parts.extend(p for p in (job.education.diploma, job.education.specialization) if p)
        return self._sector.weight_profile(" ".join(parts))

    def match_technical(
        self, cv_skills: list[HardSkill], job_skills: list[HardSkill]
    ) -> SkillMatchResult:
        """Exact, similar and transferable hard-skill matches."""
        if not job_skills:
            return SkillMatchResult(score=1.0, extra=[s.name for s in cv_skills])

        cv_names = {s.name.lower() for s in cv_skills}
        exact: list[str] = []
        similar: list[SimilarSkill] = []
        transferable: list[TransferableSkill] = []
        missing: list[str] = []

        for job_skill in job_skills:
            if job_skill.name.lower() in cv_names:
                exact.append(job_skill.name)
                continue
            best_name, best = "", 0.0
            for cv_skill in cv_skills:
                ratio = string_similarity(cv_skill.name, job_skill.name)
                if ratio > best:
                    best_name, best = cv_skill.name, ratio
            if best > SIMILAR_SKILL_THRESHOLD:
                similar.append(SimilarSkill(cv=best_name, job=job_skill.name, similarity=best))
            elif best > TRANSFERABLE_SKILL_THRESHOLD:
                transferable.append(
                    TransferableSkill(
                        cv=best_name,
                        job=job_skill.name,
                        reason=explain_transferability(best_name, job_skill.name),
                    )
                )
            else:
                missing.append(job_skill.name)

        used = {e.lower() for e in exact}
        used.update(s.cv.lower() for s in similar)
        used.update(t.cv.lower() for t in transferable)
        extra = [s.name for s in cv_skills if s.name.lower() not in used]

        required = sum(1 for s in job_skills if s.priority == "high") or len(job_skills)
        matched = len(exact) + 0.8 * len(similar) + 0.5 * len(transferable)
        return SkillMatchResult(
            score=min(1.0, matched / required),
            exact=exact,
            similar=similar,
            transferable=transferable,
            missing=missing,
            extra=extra,
        )

    def match_experience(
        self, cv: ExperienceInfo, job: ExperienceInfo
    ) -> ExperienceMatchResult:
        """Years, relevance, company type and seniority fit."""
        required_min = job.total_years
        required_max = required_min + 5
        years = years_score(cv.total_years, required_min, required_max)
        relevance = clamp(cv.relevant_years / cv.total_years) if cv.total_years > 0 else 0.0
        companies = company_type_match(cv.companies, job.preferred_company_types)
        seniority = seniority_match(cv.seniority_level, job.seniority_level)

        return ExperienceMatchResult(
            score=clamp(0.4 * years + 0.3 * relevance + 0.2 * companies + 0.1 * seniority),
            cv_years=cv.total_years,
            required_min=required_min,
            required_max=required_max,
            relevant_years=cv.relevant_years,
            seniority_match=seniority,
            company_type_match=companies,
        )

    def match_education(self, cv: EducationInfo, job: EducationInfo) -> EducationMatchResult:
        """Compare diplomas through Bac+N equivalences."""
        job_level = education_level(job)
        if not job.diploma and job_level == 0:
            return EducationMatchResult(
                score=1.0,
                cv_diploma=cv.diploma,
                required_diploma="",
                is_equivalent=True,
                explanation="Aucun diplôme exigé",
            )

        cv_level = education_level(cv)
        cv_equiv = diploma_level(cv.diploma)
        job_equiv = diploma_level(job.diploma)
        is_equivalent = bool(cv_equiv and job_equiv and cv_equiv >= job_equiv)

        if is_equivalent:
            score = 0.8
            explanation = "Équivalence de diplôme détectée"
        elif cv_level >= job_level:
            score = 0.7
            explanation = "Niveau d'études suffisant mais diplôme différent"
        else:
            score = max(0.0, cv_level / job_level * 0.5)
            explanation = "Niveau d'études inférieur aux exigences"

        if cv.specialization and job.preferred_specializations:
            spec = cv.specialization.lower()
            if any(p.lower() in spec for p in job.preferred_specializations):
                score = min(1.0, score + 0.1)

        return EducationMatchResult(
            score=score,
            cv_diploma=cv.diploma,
            required_diploma=job.diploma,
            is_equivalent=is_equivalent,
            explanation=explanation,
        )

    def match_soft_skills(
        self, cv_skills: list[SoftSkill], job_skills: list[SoftSkill]
    ) -> SoftSkillMatchResult:
        """Exact soft-skill matches plus family-based transfers at half weight."""
        if not job_skills:
            return SoftSkillMatchResult(score=1.0)

        cv_names = {s.name.lower() for s in cv_skills}
        matched: list[str] = []
        transferable: list[str] = []
        missing: list[str] = []
        for job_skill in job_skills:
            if job_skill.name.lower() in cv_names:
                matched.append(job_skill.name)
                continue
            found = self._transferable_soft_skill(cv_skills, job_skill.name)
            if found:
                transferable.append(found)
            else:
                missing.append(job_skill.name)

        score = (len(matched) + 0.5 * len(transferable)) / len(job_skills)
        return SoftSkillMatchResult(
            score=clamp(score), matched=matched, missing=missing, transferable=transferable
        )

    def _transferable_soft_skill(self, cv_skills: list[SoftSkill], job_skill: str) -> str | None:
        lowered = job_skill.lower()
        for family, members in SOFT_SKILL_FAMILIES.items():
            terms = (family, *members)
            if not any(term in lowered for term in terms):
                continue
            for skill in cv_skills:
                if any(term in skill.name.lower() for term in terms):
                    return skill.name
        return None

    def match_culture(self, cv: Culture, job: Culture) -> CulturalMatchResult:
        """Jaccard overlap of values, environment and aspirations."""
        values = set_similarity(cv.values, job.values)
        environment = set_similarity(cv.work_environment, job.work_environment)
        aspirations = set_similarity(cv.aspirations, job.aspirations)
        return CulturalMatchResult(
            score=(values + environment + aspirations) / 3,
            values_match=values,
            environment_match=environment,
            aspirations_match=aspirations,
        )

    def recommendations(self, breakdown: MatchBreakdown) -> list[MatchRecommendation]:
        """Actionable suggestions for the weakest dimensions."""
        recs: list[MatchRecommendation] = []
        if breakdown.technical.missing:
            recs.append(
                MatchRecommendation(
                    type="skill",
                    priority="high",
                    suggestion=(
                        "Développez ces compétences : "
                        + ", ".join(breakdown.technical.missing)
                    ),
                    impact=8,
                )
            )
        if breakdown.experience.score < 0.7:
            recs.append(
                MatchRecommendation(
                    type="experience",
                    priority="medium",
                    suggestion="Mettez en avant vos expériences les plus pertinentes",
                    impact=6,
                )
            )
        if breakdown.education.score < 0.8:
            recs.append(
                MatchRecommendation(
                    type="education",
                    priority="low",
                    suggestion="Précisez l'équivalence de votre diplôme",
                    impact=4,
                )
            )
        if breakdown.authenticity < 0.6:
            recs.append(
                MatchRecommendation(
                    type="authenticity",
                    priority="medium",
                    suggestion=(
                        "Reformulez les passages trop génériques avec des exemples concrets"
                    ),
                    impact=5,
                )
            )
        return recs

"""Domain skill scoring across banking, insurance, risk, IT, management and finance."""

from __future__ import annotations

import re

import structlog

from cvmatch_agents.tools.text import term_similarity
from cvmatch_core.constants import (
    DOMAIN_SKILL_TERMS,
    DOMAIN_TERM_SIMILARITY_THRESHOLD,
    MAX_MISSING_COMPETENCIES,
    MAX_MISSING_PER_DOMAIN,
)
from cvmatch_core.models.scoring import DomainSkillScoreResult

logger = structlog.get_logger()


def _term_pattern(term: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)")


_TERM_PATTERNS: dict[str, re.Pattern[str]] = {
    term: _term_pattern(term) for terms in DOMAIN_SKILL_TERMS.values() for term in terms
}


def extract_domain_skills(text: str) -> dict[str, list[str]]:
    """Domain terms present in the text as whole words, per domain."""
    lowered = text.lower()
    return {
        domain: [t for t in terms if _TERM_PATTERNS[t].search(lowered)]
        for domain, terms in DOMAIN_SKILL_TERMS.items()
    }


def contextual_alignment(
    job_skills: dict[str, list[str]], cv_skills: dict[str, list[str]]
) -> tuple[int, int, int]:
    """Domain alignment, experience relevance and skill depth, each on 0-100."""
    job_domains = [d for d, skills in job_skills.items() if skills]
    cv_domains = {d for d, skills in cv_skills.items() if skills}
    common = [d for d in job_domains if d in cv_domains]
    domain_alignment = len(common) / len(job_domains) * 100 if job_domains else 0.0

    total_job = sum(len(s) for s in job_skills.values())
    total_cv = sum(len(s) for s in cv_skills.values())
    relevance = min(100.0, total_cv / max(1, total_job) * 100) if total_cv else 0.0

    distribution = [len(s) for s in cv_skills.values()]
    deepest = max(distribution, default=0)
    depth = (sum(distribution) / len(distribution)) / deepest * 100 if deepest else 0.0
    return round(domain_alignment), round(relevance), round(depth)


def missing_competencies(
    job_skills: dict[str, list[str]], cv_skills: dict[str, list[str]]
) -> list[str]:
    """Job terms with no overlapping CV term, two per domain, five overall."""
    missing: list[str] = []
    for domain, required in job_skills.items():
        owned = cv_skills.get(domain, [])
        absent = [s for s in required if not any(s in c or c in s for c in owned)]
        missing.extend(absent[:MAX_MISSING_PER_DOMAIN])
    return missing[:MAX_MISSING_COMPETENCIES]


def domain_recommendations(
    missing: list[str], domain_alignment: int, relevance: int, depth: int
) -> list[str]:
    """French improvement hints from the contextual alignment."""
    recommendations: list[str] = []
    if domain_alignment < 70:
        recommendations.append("Renforcer l'expérience dans les domaines clés du poste")
    if depth < 60:
        recommendations.append("Approfondir l'expertise dans un domaine spécialisé")
    if len(missing) > 3:
        recommendations.append(f"Acquérir des compétences en {' et '.join(missing[:2])}")
    if relevance < 50:
        recommendations.append("Mettre en avant l'expérience bancaire/assurance existante")
    return recommendations


class DomainSkillScorer:
    """Score how well a CV covers the domain skills a job mentions."""

    def score(self, job_text: str, cv_text: str) -> DomainSkillScoreResult:
        """Weighted mix of term similarity, domain alignment, relevance and depth."""
        job_skills = extract_domain_skills(job_text)
        cv_skills = extract_domain_skills(cv_text)
        alignment, relevance, depth = contextual_alignment(job_skills, cv_skills)

        total_job = sum(len(s) for s in job_skills.values())
        shared = sum(
            1
            for domain, required in job_skills.items()
            for skill in required
            if any(
                term_similarity(skill, owned) > DOMAIN_TERM_SIMILARITY_THRESHOLD
                for owned in cv_skills[domain]
            )
        )
        similarity = shared / total_job if total_job else 0.0

        score = round(similarity * 50 + alignment * 0.25 + relevance * 0.15 + depth * 0.1)
        missing = missing_competencies(job_skills, cv_skills)
        logger.debug("domain_skill_score", score=score, similarity=round(similarity, 3))
        return DomainSkillScoreResult(
            score=max(0, min(100, score)),
            skills_extracted=cv_skills,
            domain_alignment=alignment,
            experience_relevance=relevance,
            skill_depth=depth,
            semantic_similarity=round(similarity * 100),
            missing_competencies=missing,
            recommendations=domain_recommendations(missing, alignment, relevance, depth),
        )

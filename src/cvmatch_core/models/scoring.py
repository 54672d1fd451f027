"""Scoring, matching, optimization and ATS result models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class WeightedKeyword(BaseModel):
    """A job keyword with its computed importance weight."""

    keyword: str
    frequency: int = Field(ge=0)
    position: Literal["titre", "debut", "milieu", "fin"]
    type: Literal["technique", "sectoriel", "comportemental"]
    rarity: Literal["rare", "intermediaire", "commune"]
    weight: float = Field(ge=0)


class AdvancedScoring(BaseModel):
    """Five weighted sub-scores and their combination, all in [0, 1]."""

    semantic_similarity: float = Field(ge=0.0, le=1.0)
    keyword_match: float = Field(ge=0.0, le=1.0)
    experience_relevance: float = Field(ge=0.0, le=1.0)
    skills_level: float = Field(ge=0.0, le=1.0)
    sector_alignment: float = Field(ge=0.0, le=1.0)
    overall: float = Field(ge=0.0, le=1.0)
    weighted_keywords: list[WeightedKeyword] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)

    @property
    def percent(self) -> int:
        """Overall score on a 0-100 scale."""
        return round(self.overall * 100)


class KeywordMatch(BaseModel):
    """Presence of one sector keyword in a text."""

    keyword: str
    found: bool
    similarity: float | None = None


class KeywordScoreResult(BaseModel):
    """Sector keyword scoring of a CV against a job."""

    score: int = Field(ge=0, le=100)
    sector_detected: str
    matching_keywords: list[KeywordMatch] = Field(default_factory=list)
    sectorial_breakdown: dict[str, float] = Field(default_factory=dict)
    coverage: int = Field(ge=0, le=100)


class KeywordSuggestions(BaseModel):
    """Keyword-driven improvement hints."""

    missing_keywords: list[str] = Field(default_factory=list)
    weak_keywords: list[str] = Field(default_factory=list)
    suggested_sections: list[str] = Field(default_factory=list)


class EmbeddingScoreResult(BaseModel):
    """Embedding similarity between a CV and a job, with concept bonus."""

    score: int = Field(ge=0, le=100)
    similarity: float
    semantic_matches: list[str] = Field(default_factory=list)
    concept_alignment: dict[str, float] = Field(default_factory=dict)


class SimilarSkill(BaseModel):
    """A CV skill close to a required job skill."""

    cv: str
    job: str
    similarity: float


class TransferableSkill(BaseModel):
    """A CV skill that can be adapted to a required job skill."""

    cv: str
    job: str
    reason: str


class SkillMatchResult(BaseModel):
    """Technical skill comparison."""

    score: float = Field(ge=0.0, le=1.0)
    exact: list[str] = Field(default_factory=list)
    similar: list[SimilarSkill] = Field(default_factory=list)
    transferable: list[TransferableSkill] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    extra: list[str] = Field(default_factory=list)


class ExperienceMatchResult(BaseModel):
    """Experience comparison."""

    score: float = Field(ge=0.0, le=1.0)
    cv_years: float
    required_min: float
    required_max: float
    relevant_years: float
    seniority_match: float
    company_type_match: float


class EducationMatchResult(BaseModel):
    """Education comparison using French diploma levels."""

    score: float = Field(ge=0.0, le=1.0)
    cv_diploma: str
    required_diploma: str
    is_equivalent: bool
    explanation: str


class SoftSkillMatchResult(BaseModel):
    """Soft skill comparison."""

    score: float = Field(ge=0.0, le=1.0)
    matched: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)
    transferable: list[str] = Field(default_factory=list)


class CulturalMatchResult(BaseModel):
    """Work culture comparison."""

    score: float = Field(ge=0.0, le=1.0)
    values_match: float
    environment_match: float
    aspirations_match: float


class MatchRecommendation(BaseModel):
    """An actionable suggestion derived from a match."""

    type: Literal["skill", "experience", "education", "cultural", "authenticity"]
    priority: Literal["high", "medium", "low"]
    suggestion: str
    impact: int = Field(ge=0, le=10)
    is_natural: bool = True


class MatchBreakdown(BaseModel):
    """Per-dimension results of a multi-dimensional match."""

    technical: SkillMatchResult
    experience: ExperienceMatchResult
    education: EducationMatchResult
    soft_skills: SoftSkillMatchResult
    cultural: CulturalMatchResult
    authenticity: float = Field(ge=0.0, le=1.0)


class MultiDimensionalScore(BaseModel):
    """Result of matching two FrenchExtractedData records."""

    overall: float = Field(ge=0.0, le=1.0)
    sector: str
    breakdown: MatchBreakdown
    weights: dict[str, float]
    recommendations: list[MatchRecommendation] = Field(default_factory=list)


class OptimizedCV(BaseModel):
    """A rewritten CV returned by the LLM."""

    content: str = Field(description="Full rewritten CV text, in French")
    changes: list[str] = Field(
        default_factory=list, description="Short list of the changes made"
    )


class OptimizationAttempt(BaseModel):
    """Outcome of one rewrite attempt."""

    attempt: int = Field(ge=1)
    score: float | None = Field(default=None, description="Score of the rewrite, None on error")
    accepted: bool = False
    error: str | None = None


class OptimizationResult(BaseModel):
    """Best CV found by the iterative rewrite loop."""

    original_score: float = Field(ge=0.0, le=1.0)
    best_score: float = Field(ge=0.0, le=1.0)
    best_text: str
    sector: str
    attempts: list[OptimizationAttempt] = Field(default_factory=list)

    @property
    def improved(self) -> bool:
        """Whether any rewrite beat the original."""
        return self.best_score > self.original_score


class ATSCheck(BaseModel):
    """One ATS readiness criterion or recruiter tip."""

    name: str
    points: float = Field(ge=0)
    max_points: float = Field(ge=0)
    status: Literal["success", "warning", "error"]
    message: str
    suggestion: str = ""


class ATSReport(BaseModel):
    """ATS readiness of a CV for a job."""

    score: int = Field(ge=0, le=100)
    match_rate: int = Field(ge=0, le=100)
    criteria: list[ATSCheck] = Field(default_factory=list)
    tips: list[ATSCheck] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)


class AuthenticityIssue(BaseModel):
    """A sign of over-optimization in a CV."""

    type: str
    severity: Literal["low", "medium", "high", "critical"]
    description: str


class AuthenticityBreakdown(BaseModel):
    """Per-criterion authenticity scores."""

    natural_language: float = Field(default=0.5, ge=0.0, le=1.0)
    temporal_coherence: float = Field(default=0.5, ge=0.0, le=1.0)
    personality: float = Field(default=0.5, ge=0.0, le=1.0)
    keyword_density: float = Field(default=0.5, ge=0.0, le=1.0)
    uniqueness: float = Field(default=0.5, ge=0.0, le=1.0)


class AuthenticityReport(BaseModel):
    """How natural a CV reads."""

    global_score: float = Field(default=0.5, ge=0.0, le=1.0)
    issues: list[AuthenticityIssue] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    breakdown: AuthenticityBreakdown = Field(default_factory=AuthenticityBreakdown)


class VectorScoreResult(BaseModel):
    """TF-IDF cosine similarity between a job and a CV."""

    score: int = Field(ge=0, le=100)
    similarity: float
    common_terms: list[str] = Field(default_factory=list)


class DomainSkillScoreResult(BaseModel):
    """Domain skill coverage of a CV against a job, on 0-100 scales."""

    score: int = Field(ge=0, le=100)
    skills_extracted: dict[str, list[str]] = Field(default_factory=dict)
    domain_alignment: int = 0
    experience_relevance: int = 0
    skill_depth: int = 0
    semantic_similarity: int = 0
    missing_competencies: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class HybridWeights(BaseModel):
    """Weights of the four hybrid components."""

    vector: float
    keyword: float
    embedding: float
    semantic: float


class HybridBreakdown(BaseModel):
    """Component scores of a hybrid match, on 0-100."""

    vector_score: float = 0.0
    keyword_score: float = 0.0
    embedding_score: float = 0.0
    semantic_score: float = 0.0


class ProfileContext(BaseModel):
    """Dominant domain and seniority read from a CV."""

    context: str = "general"
    experience_level: Literal["junior", "mid", "senior", "expert"] = "mid"
    domain_expertise: list[str] = Field(default_factory=list)


class HybridScoreResult(BaseModel):
    """Combined vector, keyword, embedding and domain score with its explanation."""

    final_score: int = Field(ge=0, le=100)
    base_score: float
    confidence: int = Field(ge=0, le=100)
    mode: Literal["fast", "balanced", "comprehensive"]
    breakdown: HybridBreakdown
    weights: HybridWeights
    profile: ProfileContext
    sector_detected: str
    transferability: float | None = None
    skills_alignment: list[str] = Field(default_factory=list)
    missing_competencies: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    conceptual_matches: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    detailed_justification: str = ""
    match_explanation: str = ""

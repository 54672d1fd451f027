"""Domain models for cvmatch."""

from cvmatch_core.models.cv import (
    CVContent,
    CVData,
    EducationEntry,
    Experience,
    LinkedInProfile,
    PersonalInfo,
    Skill,
)
from cvmatch_core.models.extraction import FrenchExtractedData
from cvmatch_core.models.job import JobData, JobQualifications, ParsedJob
from cvmatch_core.models.run import AgentError, MatchConfig, MatchResult
from cvmatch_core.models.scoring import (
    AdvancedScoring,
    ATSReport,
    AuthenticityReport,
    HybridScoreResult,
    MultiDimensionalScore,
    OptimizationResult,
    WeightedKeyword,
)

__all__ = [
    "ATSReport",
    "AdvancedScoring",
    "AgentError",
    "AuthenticityReport",
    "CVContent",
    "CVData",
    "EducationEntry",
    "Experience",
    "FrenchExtractedData",
    "HybridScoreResult",
    "JobData",
    "JobQualifications",
    "LinkedInProfile",
    "MatchConfig",
    "MatchResult",
    "MultiDimensionalScore",
    "OptimizationResult",
    "ParsedJob",
    "PersonalInfo",
    "Skill",
    "WeightedKeyword",
]

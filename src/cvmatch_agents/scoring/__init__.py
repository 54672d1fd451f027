"""Scoring engines: keywords, sector, semantic, vector, domain, hybrid, advanced, matching, ATS."""

from cvmatch_agents.scoring.advanced import AdvancedScorer
from cvmatch_agents.scoring.ats import ATSAnalyzer
from cvmatch_agents.scoring.domain import DomainSkillScorer
from cvmatch_agents.scoring.hybrid import HybridScorer
from cvmatch_agents.scoring.keywords import extract_weighted_keywords
from cvmatch_agents.scoring.multi_dimensional import MultiDimensionalMatcher
from cvmatch_agents.scoring.sector import SectorKeywordScorer
from cvmatch_agents.scoring.semantic import SemanticScorer
from cvmatch_agents.scoring.vector import VectorScorer

__all__ = [
    "ATSAnalyzer",
    "AdvancedScorer",
    "DomainSkillScorer",
    "HybridScorer",
    "MultiDimensionalMatcher",
    "SectorKeywordScorer",
    "SemanticScorer",
    "VectorScorer",
    "extract_weighted_keywords",
]

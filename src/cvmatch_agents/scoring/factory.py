"""Build the scoring stack from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cvmatch_agents.scoring.advanced import AdvancedScorer
from cvmatch_agents.scoring.domain import DomainSkillScorer
from cvmatch_agents.scoring.hybrid import HybridScorer
from cvmatch_agents.scoring.sector import SectorKeywordScorer
from cvmatch_agents.scoring.semantic import SemanticScorer
from cvmatch_agents.scoring.vector import VectorScorer
from cvmatch_agents.tools.factories import create_embedder

if TYPE_CHECKING:
    from cvmatch_core.config.settings import Settings
    from cvmatch_core.interfaces.cache import CacheClient


def create_semantic_scorer(
    settings: Settings,
    cache: CacheClient | None = None,
    use_cache: bool = True,
) -> SemanticScorer:
    """Create a SemanticScorer backed by the configured embedder.

    Embeddings are cached on disk under ``settings.cache_dir`` unless
    ``use_cache`` is False or another cache is passed in.
    """
    if cache is None and use_cache:
        from cvmatch_infra.cache.disk_cache import DiskCacheClient

        cache = DiskCacheClient(settings.cache_dir)
    embedder = create_embedder(settings, cache)
    return SemanticScorer(embedder, max_chars=settings.embedding_max_chars)


def create_advanced_scorer(
    settings: Settings,
    cache: CacheClient | None = None,
    use_cache: bool = True,
) -> AdvancedScorer:
    """Create an AdvancedScorer backed by the configured embedder."""
    return AdvancedScorer(
        create_semantic_scorer(settings, cache, use_cache),
        SectorKeywordScorer(),
    )


def create_hybrid_scorer(
    settings: Settings,
    cache: CacheClient | None = None,
    use_cache: bool = True,
    banking_insurance_focus: bool = True,
) -> HybridScorer:
    """Create a HybridScorer backed by the configured embedder."""
    return HybridScorer(
        VectorScorer(),
        SectorKeywordScorer(),
        create_semantic_scorer(settings, cache, use_cache),
        DomainSkillScorer(),
        banking_insurance_focus=banking_insurance_focus,
    )

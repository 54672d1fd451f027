"""Embedding-based similarity with a banking/insurance concept bonus."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cvmatch_agents.tools.text import preprocess_for_embedding
from cvmatch_core.constants import (
    BANKING_INSURANCE_CONCEPTS,
    CONCEPT_MATCH_THRESHOLD,
    MAX_CONCEPT_BONUS,
    MAX_SEMANTIC_MATCHES,
)
from cvmatch_core.exceptions import EmbeddingError
from cvmatch_core.models.scoring import EmbeddingScoreResult
from cvmatch_infra.vector.similarity import cosine_similarity

if TYPE_CHECKING:
    from cvmatch_core.interfaces.embedder import EmbedderBase

logger = structlog.get_logger()


def concept_alignment(job_text: str, cv_text: str) -> dict[str, float]:
    """Harmonic mean of job and CV coverage for each domain concept."""
    job_lower = job_text.lower()
    cv_lower = cv_text.lower()
    alignment: dict[str, float] = {}
    for concept, keywords in BANKING_INSURANCE_CONCEPTS.items():
        job_cov = sum(1 for kw in keywords if kw in job_lower) / len(keywords)
        cv_cov = sum(1 for kw in keywords if kw in cv_lower) / len(keywords)
        total = job_cov + cv_cov
        alignment[concept] = 2 * job_cov * cv_cov / total if total > 0 else 0.0
    return alignment


def semantic_matches(alignment: dict[str, float]) -> list[str]:
    """Format well-aligned concepts, e.g. ``RISK MANAGEMENT (45.0%)``."""
    matches = [
        f"{concept.replace('_', ' ').upper()} ({value * 100:.1f}%)"
        for concept, value in alignment.items()
        if value > CONCEPT_MATCH_THRESHOLD
    ]
    return matches[:MAX_SEMANTIC_MATCHES]


def _final_score(similarity: float, alignment: dict[str, float]) -> int:
    """Base cosine score plus the capped concept bonus, on 0-100."""
    base = max(0.0, similarity) * 100
    bonus = min(MAX_CONCEPT_BONUS, sum(alignment.values()) * 2)
    return round(min(100.0, base + bonus))


class SemanticScorer:
    """Score CV/job similarity with embeddings."""

    def __init__(self, embedder: EmbedderBase, max_chars: int = 8000) -> None:
        """Initialize with an embedder and the input truncation length."""
        self._embedder = embedder
        self._max_chars = max_chars

    async def score(self, job_text: str, cv_text: str) -> EmbeddingScoreResult:
        """Embed both texts and combine cosine similarity with concept bonus.

        Embedding failures yield a zero result rather than an exception.
        """
        try:
            job_vec, cv_vec = await self._embedder.embed_batch(
                [
                    preprocess_for_embedding(job_text, self._max_chars),
                    preprocess_for_embedding(cv_text, self._max_chars),
                ]
            )
        except EmbeddingError as e:
            logger.error("semantic_score_failed", error=str(e))
            return EmbeddingScoreResult(score=0, similarity=0.0)

        similarity = cosine_similarity(job_vec, cv_vec)
        alignment = concept_alignment(job_text, cv_text)
        result = EmbeddingScoreResult(
            score=_final_score(similarity, alignment),
            similarity=similarity,
            semantic_matches=semantic_matches(alignment),
            concept_alignment=alignment,
        )
        logger.debug("semantic_score", similarity=round(similarity, 4), score=result.score)
        return result

    async def batch_score(self, cv_text: str, job_texts: list[str]) -> list[EmbeddingScoreResult]:
        """Score one CV against several jobs, embedding the CV once."""
        if not job_texts:
            return []
        try:
            vectors = await self._embedder.embed_batch(
                [preprocess_for_embedding(t, self._max_chars) for t in (cv_text, *job_texts)]
            )
        except EmbeddingError as e:
            logger.error("semantic_batch_failed", error=str(e), jobs=len(job_texts))
            return [EmbeddingScoreResult(score=0, similarity=0.0) for _ in job_texts]

        cv_vec, job_vecs = vectors[0], vectors[1:]
        results: list[EmbeddingScoreResult] = []
        for job_text, job_vec in zip(job_texts, job_vecs, strict=True):
            similarity = cosine_similarity(job_vec, cv_vec)
            alignment = concept_alignment(job_text, cv_text)
            results.append(
                EmbeddingScoreResult(
                    score=_final_score(similarity, alignment),
                    similarity=similarity,
                    semantic_matches=semantic_matches(alignment),
                    concept_alignment=alignment,
                )
            )
        return results

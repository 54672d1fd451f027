"""TF-IDF vector similarity over stemmed, stopword-filtered tokens."""

from __future__ import annotations

import re

import structlog
from nltk.stem.snowball import SnowballStemmer
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.metrics.pairwise import cosine_similarity

from cvmatch_core.constants import MAX_COMMON_TERMS, MIN_TOKEN_LENGTH, VECTOR_STOPWORDS
from cvmatch_core.models.scoring import VectorScoreResult

logger = structlog.get_logger()

_PUNCT_RE = re.compile(r"[^\w\s]")


class VectorScorer:
    """Compare a job and a CV as TF-IDF vectors fitted on the pair."""

    def __init__(self, language: str = "french") -> None:
        """Initialize with the Snowball stemmer language."""
        self._stemmer = SnowballStemmer(language)

    def tokenize(self, text: str) -> list[str]:
        """Lowercase, strip punctuation, drop stopwords and short or numeric tokens, stem."""
        words = _PUNCT_RE.sub(" ", text.lower()).split()
        tokens: list[str] = []
        for word in words:
            if word in VECTOR_STOPWORDS or len(word) < MIN_TOKEN_LENGTH:
                continue
            stem = self._stemmer.stem(word)
            if len(stem) >= MIN_TOKEN_LENGTH and not stem.isdigit():
                tokens.append(stem)
        return tokens

    def score(self, job_text: str, cv_text: str) -> VectorScoreResult:
        """Cosine similarity of the two TF-IDF vectors, on 0-100."""
        job_tokens = self.tokenize(job_text)
        cv_tokens = self.tokenize(cv_text)
        if not job_tokens or not cv_tokens:
            return VectorScoreResult(score=0, similarity=0.0)

        vectorizer = TfidfVectorizer(analyzer=lambda tokens: tokens)
        matrix = vectorizer.fit_transform([job_tokens, cv_tokens])
        similarity = float(cosine_similarity(matrix[0:1], matrix[1:2])[0][0])

        cv_set = set(cv_tokens)
        common = [t for t in dict.fromkeys(job_tokens) if t in cv_set]
        logger.debug(
            "vector_score",
            job_tokens=len(job_tokens),
            cv_tokens=len(cv_tokens),
            vocabulary=len(vectorizer.vocabulary_),
            common=len(common),
            similarity=round(similarity, 4),
        )
        return VectorScoreResult(
            score=round(max(0.0, min(100.0, similarity * 100))),
            similarity=similarity,
            common_terms=common[:MAX_COMMON_TERMS],
        )

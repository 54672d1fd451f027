"""Tests for TF-IDF vector scoring."""

from __future__ import annotations

import pytest

from cvmatch_agents.scoring.vector import VectorScorer


@pytest.fixture
def scorer() -> VectorScorer:
    """French vector scorer."""
    return VectorScorer()


@pytest.mark.unit
class TestTokenize:
    """Test tokenization before vectorization."""

    def test_stopwords_and_short_words_dropped(self, scorer: VectorScorer) -> None:
        """Stopwords and words under three characters never become tokens."""
        tokens = scorer.tokenize("Le développeur et la données")
        stem = scorer._stemmer.stem
        assert tokens == [stem("développeur"), stem("données")]

    def test_punctuation_stripped(self, scorer: VectorScorer) -> None:
        """Punctuation splits words and is discarded."""
        stem = scorer._stemmer.stem
        assert scorer.tokenize("Python, SQL!") == [stem("python"), stem("sql")]

    def test_numbers_dropped(self, scorer: VectorScorer) -> None:
        """Purely numeric tokens are ignored."""
        assert scorer.tokenize("2024 python") == [scorer._stemmer.stem("python")]

    def test_inflections_share_a_stem(self, scorer: VectorScorer) -> None:
        """Plural and singular forms collapse onto one token."""
        assert scorer.tokenize("risques") == scorer.tokenize("risque")


@pytest.mark.unit
class TestVectorScore:
    """Test TF-IDF cosine scoring."""

    def test_identical_texts(self, scorer: VectorScorer) -> None:
        """Identical texts are fully similar."""
        text = "Analyste risque de crédit, modélisation bâle et stress testing"
        result = scorer.score(text, text)
        assert result.similarity == pytest.approx(1.0)
        assert result.score == 100

    def test_disjoint_texts(self, scorer: VectorScorer) -> None:
        """No shared term gives a zero score."""
        result = scorer.score("actuaire tarification", "développeur javascript")
        assert result.score == 0
        assert result.common_terms == []

    def test_partial_overlap(self, scorer: VectorScorer) -> None:
        """Shared terms land strictly between the extremes."""
        result = scorer.score(
            "Analyste risque crédit python", "Développeur python, analyste données"
        )
        assert 0 < result.score < 100
        stem = scorer._stemmer.stem
        assert result.common_terms == [stem("analyste"), stem("python")]

    def test_empty_input(self, scorer: VectorScorer) -> None:
        """Text with no usable token scores zero without fitting."""
        result = scorer.score("le la et", "python")
        assert result.score == 0
        assert result.similarity == 0.0

    def test_common_terms_capped(self, scorer: VectorScorer) -> None:
        """At most ten common terms are reported, in job order."""
        words = [
            "python", "docker", "kubernetes", "terraform", "ansible", "jenkins",
            "grafana", "prometheus", "postgres", "redis", "kafka", "spark",
        ]
        text = " ".join(words)
        result = scorer.score(text, text)
        assert len(result.common_terms) == 10
        assert result.common_terms[0] == scorer._stemmer.stem("python")

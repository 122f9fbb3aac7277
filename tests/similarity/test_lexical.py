"""Tests for lexical similarity fallbacks."""

import pytest

from rabbithole.similarity import (
    jaccard_similarity,
    semantic_distance,
    text_similarity,
    tokenize,
    word_overlap_ratio,
    word_set,
)


class TestTokenization:
    """Tests for word_set and tokenize."""

    def test_word_set_lowercases(self):
        assert word_set("The cat, the HAT.") == {"the", "cat", "hat"}

    def test_tokenize_strips_punctuation_and_short_tokens(self):
        """Tokens shorter than three characters should be dropped."""
        assert tokenize("Hi, the Quick-fox!") == ["the", "quick", "fox"]


class TestJaccard:
    """Tests for Jaccard similarity and semantic distance."""

    def test_partial_overlap(self):
        assert jaccard_similarity("a b c", "b c d") == pytest.approx(0.5)

    def test_both_empty(self):
        """Two empty texts should have similarity 0, not a division error."""
        assert jaccard_similarity("", "") == 0.0

    def test_distance_is_complement(self):
        assert semantic_distance("a b c", "b c d") == pytest.approx(0.5)
        assert semantic_distance("same words", "same words") == pytest.approx(0.0)


class TestWordOverlapRatio:
    """Tests for bag-of-words overlap."""

    def test_duplicates_counted(self):
        """Repeated words in the first text each count toward overlap."""
        assert word_overlap_ratio("the cat the dog", "the bird") == pytest.approx(0.5)

    def test_divides_by_longer_text(self):
        assert word_overlap_ratio("one", "one two three four") == pytest.approx(0.25)

    def test_empty(self):
        assert word_overlap_ratio("", "") == 0.0


class TestTextSimilarity:
    """Tests for step-level similarity with embedding fallback."""

    def test_uses_embeddings_when_both_present(self, make_step):
        a = make_step("alpha", embedding=(1.0, 0.0))
        b = make_step("beta", embedding=(1.0, 0.0))
        assert text_similarity(a, b) == pytest.approx(1.0)

    def test_negative_cosine_clamped(self, make_step):
        """Anti-aligned embeddings should be treated as unrelated."""
        a = make_step("alpha", embedding=(1.0, 0.0))
        b = make_step("alpha", embedding=(-1.0, 0.0))
        assert text_similarity(a, b) == 0.0

    def test_falls_back_to_jaccard(self, make_step):
        """A missing embedding on either side should use word-set Jaccard."""
        a = make_step("a b c", embedding=(1.0, 0.0))
        b = make_step("b c d")
        assert text_similarity(a, b) == pytest.approx(0.5)

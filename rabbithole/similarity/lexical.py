"""Lexical similarity helpers.

These stand in for semantic similarity whenever a step carries no embedding
(provider not called, or the call failed).
"""

import re
from typing import TYPE_CHECKING

from rabbithole.similarity.vectors import cosine_similarity

if TYPE_CHECKING:
    from rabbithole.models import Step

_WORD_RE = re.compile(r"\b\w+\b")
_PUNCT_RE = re.compile(r"[^\w\s]")


def word_set(text: str) -> set[str]:
    """Lowercased set of word tokens."""
    return set(_WORD_RE.findall(text.lower()))


def tokenize(text: str, min_length: int = 3) -> list[str]:
    """Lowercase, strip punctuation and drop tokens shorter than ``min_length``."""
    cleaned = _PUNCT_RE.sub(" ", text.lower())
    return [token for token in cleaned.split() if len(token) >= min_length]


def jaccard_similarity(text_a: str, text_b: str) -> float:
    """Jaccard similarity of the two texts' word sets (0.0 if both are empty)."""
    words_a = word_set(text_a)
    words_b = word_set(text_b)
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def token_jaccard(tokens_a: list[str], tokens_b: list[str]) -> float:
    """Jaccard similarity over pre-tokenized input."""
    set_a = set(tokens_a)
    set_b = set(tokens_b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def semantic_distance(text_a: str, text_b: str) -> float:
    """Lexical stand-in for semantic distance: ``1 - jaccard``."""
    return 1.0 - jaccard_similarity(text_a, text_b)


def word_overlap_ratio(text_a: str, text_b: str) -> float:
    """Bag-of-words overlap between two texts.

    Counts words of ``text_a`` (duplicates included) that also occur in
    ``text_b`` and divides by the longer word list.
    """
    words_a = text_a.lower().split()
    words_b = text_b.lower().split()
    longest = max(len(words_a), len(words_b))
    if longest == 0:
        return 0.0
    vocabulary_b = set(words_b)
    overlap = sum(1 for word in words_a if word in vocabulary_b)
    return overlap / longest


def text_similarity(step_a: "Step", step_b: "Step") -> float:
    """Similarity between two steps in [0, 1].

    Uses embedding cosine similarity when both steps carry an embedding,
    clamped at 0 (anti-aligned text is treated as unrelated). Falls back to
    word-set Jaccard similarity otherwise.
    """
    vec_a = step_a.vector
    vec_b = step_b.vector
    if vec_a is not None and vec_b is not None:
        return max(0.0, min(1.0, cosine_similarity(vec_a, vec_b)))
    return jaccard_similarity(step_a.text, step_b.text)

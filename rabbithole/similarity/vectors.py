"""Vector similarity, novelty-vs-history scoring and greedy clustering.

All functions are pure and accept anything ``np.asarray`` understands.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from rabbithole.errors import DimensionMismatch

DEFAULT_QUALITY_WEIGHT = 0.3
DEFAULT_CLUSTER_THRESHOLD = 0.7


@dataclass(frozen=True)
class HistoricalEmbedding:
    """A previously accepted embedding and the quality recorded for it.

    Attributes:
        vector: The embedding
        quality: Quality score of the step that produced it (0-1 scale)
    """

    vector: np.ndarray
    quality: float = 0.0


def _as_vector(v) -> np.ndarray:
    return np.asarray(v, dtype=np.float64).ravel()


def cosine_similarity(a, b) -> float:
    """Compute cosine similarity between two vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        Cosine similarity in [-1, 1] range. Returns 0.0 if either
        vector has zero magnitude.

    Raises:
        DimensionMismatch: If the vectors differ in length.
    """
    a = _as_vector(a)
    b = _as_vector(b)
    if a.shape[0] != b.shape[0]:
        raise DimensionMismatch(a.shape[0], b.shape[0])

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)

    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.clip(np.dot(a, b) / (norm_a * norm_b), -1.0, 1.0))


def euclidean_distance(a, b) -> float:
    """Euclidean distance between two equal-length vectors."""
    a = _as_vector(a)
    b = _as_vector(b)
    if a.shape[0] != b.shape[0]:
        raise DimensionMismatch(a.shape[0], b.shape[0])
    return float(np.linalg.norm(a - b))


def novelty_score(
    candidate,
    history: Sequence[HistoricalEmbedding],
    quality_weight: float = DEFAULT_QUALITY_WEIGHT,
) -> float:
    """Score how novel ``candidate`` is against accepted history.

    Similarity to each historical embedding is inflated by that item's
    quality, so resembling a high-quality insight costs more novelty than
    resembling a weak one.

    Args:
        candidate: Embedding to score
        history: Previously accepted embeddings with their quality
        quality_weight: How strongly quality inflates similarity

    Returns:
        Novelty in [0, 1]. 1.0 for an empty history (the first item is
        maximally novel).
    """
    if not history:
        return 1.0

    weighted = [
        cosine_similarity(candidate, item.vector) * (1.0 + item.quality * quality_weight)
        for item in history
    ]
    return max(0.0, min(1.0, 1.0 - max(weighted)))


def cluster_by_threshold(
    vectors: Sequence,
    threshold: float = DEFAULT_CLUSTER_THRESHOLD,
) -> list[list[int]]:
    """Greedy single-pass clustering.

    Each unclustered vector seeds a cluster and absorbs every still
    unclustered vector whose similarity to the seed is >= ``threshold``.
    O(n^2) and order dependent, but deterministic for a stable input order.

    Returns:
        Clusters as lists of indices into ``vectors``, seeds first.
    """
    clusters: list[list[int]] = []
    processed: set[int] = set()

    for i, seed in enumerate(vectors):
        if i in processed:
            continue
        cluster = [i]
        processed.add(i)
        for j in range(i + 1, len(vectors)):
            if j in processed:
                continue
            if cosine_similarity(seed, vectors[j]) >= threshold:
                cluster.append(j)
                processed.add(j)
        clusters.append(cluster)

    return clusters

"""Similarity utilities: vector math, lexical fallbacks and convergence.

Usage:
    from rabbithole.similarity import cosine_similarity, novelty_score

    novelty = novelty_score(candidate, history)
"""

from rabbithole.similarity.convergence import (
    ConvergenceConfig,
    ConvergenceMetrics,
    assess_convergence,
)
from rabbithole.similarity.lexical import (
    jaccard_similarity,
    semantic_distance,
    text_similarity,
    tokenize,
    word_overlap_ratio,
    word_set,
)
from rabbithole.similarity.novelty import (
    NoveltyConfig,
    NoveltyMetrics,
    analyze_novelty,
)
from rabbithole.similarity.vectors import (
    HistoricalEmbedding,
    cluster_by_threshold,
    cosine_similarity,
    euclidean_distance,
    novelty_score,
)

__all__ = [
    "ConvergenceConfig",
    "ConvergenceMetrics",
    "HistoricalEmbedding",
    "NoveltyConfig",
    "NoveltyMetrics",
    "analyze_novelty",
    "assess_convergence",
    "cluster_by_threshold",
    "cosine_similarity",
    "euclidean_distance",
    "jaccard_similarity",
    "novelty_score",
    "semantic_distance",
    "text_similarity",
    "tokenize",
    "word_overlap_ratio",
    "word_set",
]

"""Jaccard-based convergence assessment.

Decides whether an exploration has stopped producing new material by
looking at lexical similarity between consecutive responses. Computed as a
fold over the full response list, so repeated calls on the same list agree.
"""

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from rabbithole.similarity.lexical import token_jaccard, tokenize


@dataclass
class ConvergenceConfig:
    """Thresholds for convergence detection.

    Attributes:
        jaccard_threshold: Similarity of the last two responses required
        stability_threshold: Required stability of the similarity series
        novelty_threshold: Maximum tolerated rise in similarity
        window_size: Number of similarity values used for stability
        min_iterations: Minimum responses before convergence is possible
    """

    jaccard_threshold: float = 0.85
    stability_threshold: float = 0.9
    novelty_threshold: float = 0.1
    window_size: int = 3
    min_iterations: int = 2

    def __post_init__(self) -> None:
        if self.window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {self.window_size}")
        for name in ("jaccard_threshold", "stability_threshold", "novelty_threshold"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be in (0, 1], got {value}")


@dataclass(frozen=True)
class ConvergenceMetrics:
    """Convergence state after the latest response."""

    jaccard_similarity: float
    semantic_stability: float
    novelty_decrease: float
    is_converged: bool
    confidence: float


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def assess_convergence(
    texts: Sequence[str],
    config: ConvergenceConfig | None = None,
) -> ConvergenceMetrics:
    """Assess convergence of an ordered list of responses.

    Args:
        texts: Responses in generation order
        config: Thresholds (defaults if None)

    Returns:
        ConvergenceMetrics for the most recent response.
    """
    config = config or ConvergenceConfig()

    if len(texts) < 2:
        return ConvergenceMetrics(0.0, 0.0, 1.0, False, 0.0)

    tokens = [tokenize(text) for text in texts]
    history = [token_jaccard(tokens[i - 1], tokens[i]) for i in range(1, len(tokens))]
    jaccard = history[-1]

    # Stability is 1 - std of the recent similarity window
    stability = 0.0
    if len(history) >= config.window_size:
        stability = max(0.0, 1.0 - float(np.std(history[-config.window_size:])))

    novelty_decrease = 0.0
    if len(history) > 2:
        recent = history[-2:]
        earlier = history[:-2]
        novelty_decrease = max(0.0, _mean(recent) - _mean(earlier))

    is_converged = (
        len(texts) >= config.min_iterations
        and jaccard >= config.jaccard_threshold
        and stability >= config.stability_threshold
        and novelty_decrease <= config.novelty_threshold
    )

    confidence = (
        0.4 * min(jaccard / config.jaccard_threshold, 1.0)
        + 0.4 * min(stability / config.stability_threshold, 1.0)
        + 0.2 * max(0.0, 1.0 - novelty_decrease / config.novelty_threshold)
    )

    return ConvergenceMetrics(
        jaccard_similarity=jaccard,
        semantic_stability=stability,
        novelty_decrease=novelty_decrease,
        is_converged=is_converged,
        confidence=confidence,
    )

"""Conceptual novelty metric: vocabulary signalling new ideas.

Each distinct novelty indicator found adds 0.1, each distinct complexity
indicator 0.05 (the weights live on the tables). Repeating a word does not
add more.
"""

from typing import TYPE_CHECKING, Sequence

from rabbithole.indicators.tables import COMPLEXITY, NOVELTY, IndicatorSet
from rabbithole.scoring.metrics.base import BaseMetric

if TYPE_CHECKING:
    from rabbithole.models import Step


def conceptual_novelty(
    text: str,
    novelty: IndicatorSet = NOVELTY,
    complexity: IndicatorSet = COMPLEXITY,
) -> float:
    """Novelty of ``text`` from its vocabulary alone, capped at 1.0."""
    return min(1.0, novelty.hit_weight(text) + complexity.hit_weight(text))


class ConceptualNoveltyMetric(BaseMetric):
    """History-independent novelty from indicator vocabulary."""

    def __init__(self, novelty: IndicatorSet = NOVELTY, complexity: IndicatorSet = COMPLEXITY):
        self.novelty = novelty
        self.complexity = complexity

    def compute(self, step: "Step", preceding: Sequence["Step"] = ()) -> float:
        return self.clamp(conceptual_novelty(step.text, self.novelty, self.complexity))

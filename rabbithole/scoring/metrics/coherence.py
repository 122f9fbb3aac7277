"""Coherence metric: how well a step builds on its recent context.

Compares the step against the most recent prior steps with
``text_similarity`` (embedding cosine when both sides carry one, word-set
Jaccard otherwise) and averages.
"""

from typing import TYPE_CHECKING, Sequence

from rabbithole.scoring.metrics.base import BaseMetric
from rabbithole.similarity.lexical import text_similarity

if TYPE_CHECKING:
    from rabbithole.models import Step


class ContextCoherenceMetric(BaseMetric):
    """Mean similarity to the last ``window`` preceding steps.

    Attributes:
        window: Number of preceding steps compared
    """

    def __init__(self, window: int = 3):
        self.window = window

    def compute(self, step: "Step", preceding: Sequence["Step"]) -> float:
        """Compute coherence with recent context.

        Returns:
            Mean similarity in [0, 1]; 0.0 when there are no preceding steps.
        """
        recent = list(preceding)[-self.window:]
        if not recent:
            return 0.0
        total = sum(text_similarity(step, other) for other in recent)
        return self.clamp(total / len(recent))

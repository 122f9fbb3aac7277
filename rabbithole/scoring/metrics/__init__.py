"""Brilliance component metrics.

Each metric computes an unweighted score in [0, 1] range for a step.
"""

from rabbithole.scoring.metrics.base import BaseMetric
from rabbithole.scoring.metrics.coherence import ContextCoherenceMetric
from rabbithole.scoring.metrics.judge import JudgeMetric
from rabbithole.scoring.metrics.novelty import ConceptualNoveltyMetric, conceptual_novelty

__all__ = [
    "BaseMetric",
    "ConceptualNoveltyMetric",
    "ContextCoherenceMetric",
    "JudgeMetric",
    "conceptual_novelty",
]

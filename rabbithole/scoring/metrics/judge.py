"""Judge metric: external judge scores mapped into [0, 1]."""

from typing import TYPE_CHECKING, Sequence

from rabbithole.models import DEFAULT_JUDGE_SCALE
from rabbithole.scoring.metrics.base import BaseMetric

if TYPE_CHECKING:
    from rabbithole.models import Step


class JudgeMetric(BaseMetric):
    """Mean of every judge dimension present on the step.

    Steps without judge scores (or with no dimension set) score 0, so an
    unjudged step can still earn brilliance through novelty and coherence
    but never through the judge component.
    """

    def __init__(self, scale: float = DEFAULT_JUDGE_SCALE):
        self.scale = scale

    def compute(self, step: "Step", preceding: Sequence["Step"] = ()) -> float:
        if step.judge_scores is None:
            return 0.0
        mean = step.judge_scores.normalized_mean(self.scale)
        return 0.0 if mean is None else mean

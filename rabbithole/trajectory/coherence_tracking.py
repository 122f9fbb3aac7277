"""Conceptual saturation tracking.

Watches the latest step for metaphor density and newly introduced terms,
the recent window for lexical repetition, and the judge scores for a
quality trend. Combines them into a saturation risk and, when warranted,
a recommendation to switch exploration mode.
"""

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

from rabbithole.indicators.tables import phrases

if TYPE_CHECKING:
    from rabbithole.models import Step

METAPHORS = phrases("metaphors", "1", [
    "epistemic", "ontological", "meta-", "shadow", "mirror", "gravity",
    "friction", "resonance", "decay", "camouflage", "wildfire", "echo",
    "paradigm", "framework", "spectrum", "gradient", "field",
])

# Quoted or bold terms count as newly introduced concepts
_NEW_CONCEPT_RE = re.compile(r"\"([^\"]+)\"|'([^']+)'|\*\*([^*]+)\*\*")

_TREND_DIMENSIONS = ("depth", "novelty", "coherence")
_DEFAULT_TREND_SCORE = 7.0


@dataclass(frozen=True)
class CoherenceReport:
    """Saturation signals for the latest state of a session.

    Attributes:
        metaphor_density: Metaphor keywords per 1000 characters of the last step
        conceptual_complexity: Quoted or emphasised terms in the last step
        repetition: Share of repeated words across the recent window, 0-100
        quality_trend: improving, stable or declining
        saturation_risk: low, medium or high
        recommendation: Suggested mode change, if any
    """

    metaphor_density: float
    conceptual_complexity: int
    repetition: float
    quality_trend: str
    saturation_risk: str
    recommendation: Optional[str] = None


def repetition(steps: Sequence["Step"]) -> float:
    """Percentage of words in ``steps`` that repeat an earlier word."""
    if len(steps) < 2:
        return 0.0
    words = " ".join(step.text.lower() for step in steps).split()
    if not words:
        return 0.0
    return min((1.0 - len(set(words)) / len(words)) * 100.0, 100.0)


def _trend_score(step: "Step") -> float:
    if step.judge_scores is None:
        return _DEFAULT_TREND_SCORE
    present = step.judge_scores.present()
    values = [present[name] for name in _TREND_DIMENSIONS if name in present]
    if not values:
        return _DEFAULT_TREND_SCORE
    return sum(values) / len(values)


def quality_trend(steps: Sequence["Step"]) -> str:
    if len(steps) < 3:
        return "stable"
    scores = [_trend_score(step) for step in steps[-3:]]
    change = scores[-1] - scores[0]
    if change > 0.5:
        return "improving"
    if change < -0.5:
        return "declining"
    return "stable"


def saturation_risk(metaphor_density: float, complexity: int, similarity: float) -> str:
    if similarity > 80 or (metaphor_density < 2 and complexity < 2):
        return "high"
    if similarity > 60 or (metaphor_density < 3 and complexity < 3):
        return "medium"
    return "low"


def recommend(risk: str, trend: str, step_count: int) -> Optional[str]:
    if risk == "high":
        return "Consider introducing radically new concepts or paradigm shifts"
    if trend == "declining":
        return "Try grounding mode to excavate deeper insights"
    if step_count > 15 and risk == "medium":
        return "Switch to cycling mode to break conceptual patterns"
    return None


def track_coherence(steps: Sequence["Step"], window: int = 5) -> CoherenceReport:
    """Assess conceptual saturation of a session.

    Args:
        steps: Session steps in sequence order
        window: Number of recent steps for repetition and trend

    Returns:
        CoherenceReport. An empty session reports low risk and no
        recommendation.
    """
    steps = list(steps)
    if not steps:
        return CoherenceReport(0.0, 0, 0.0, "stable", "low", None)

    recent = steps[-window:]
    last = steps[-1].text

    metaphor_density = 0.0
    if last:
        metaphor_density = METAPHORS.count(last) / (len(last) / 1000.0)
    complexity = len(_NEW_CONCEPT_RE.findall(last))
    similarity = repetition(recent)
    trend = quality_trend(recent)
    risk = saturation_risk(metaphor_density, complexity, similarity)

    return CoherenceReport(
        metaphor_density=metaphor_density,
        conceptual_complexity=complexity,
        repetition=similarity,
        quality_trend=trend,
        saturation_risk=risk,
        recommendation=recommend(risk, trend, len(steps)),
    )

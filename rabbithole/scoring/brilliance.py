"""BrillianceScorer: per-step brilliance and crown-jewel extraction.

Brilliance blends three pre-weighted components (judge, novelty, coherence)
and clamps the sum to [0, 1]. It is context dependent: the coherence
component compares a step with the steps before it, so records are always
recomputed from a full session snapshot rather than patched.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from operator import attrgetter
from typing import TYPE_CHECKING, Optional, Sequence

from rabbithole.indicators.tables import (
    CATEGORY_FAMILIES,
    DEFAULT_CATEGORY,
    INSIGHT_CUES,
    TRANSFORMATIVE,
)
from rabbithole.scoring.config import BrillianceConfig
from rabbithole.scoring.metrics.coherence import ContextCoherenceMetric
from rabbithole.scoring.metrics.judge import JudgeMetric
from rabbithole.scoring.metrics.novelty import ConceptualNoveltyMetric

if TYPE_CHECKING:
    from rabbithole.models import Step

logger = logging.getLogger(__name__)

BRILLIANCE_CATEGORIES = ("paradigmatic", "practical", "aesthetic", "generative")

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_MIN_INSIGHT_SENTENCE = 20
_INSIGHT_FALLBACK_CHARS = 200


@dataclass
class BrillianceComponents:
    """Weighted components of one brilliance score.

    Attributes:
        judge: Judge component, weight already applied
        novelty: Novelty component, weight already applied
        coherence: Coherence component, weight already applied
    """

    judge: float
    novelty: float
    coherence: float

    @property
    def total(self) -> float:
        return max(0.0, min(1.0, self.judge + self.novelty + self.coherence))


@dataclass
class BrillianceRecord:
    """Brilliance of one step within its session.

    Attributes:
        step_id: Id of the scored step
        sequence_number: Position of the step in the session
        score: Brilliance in [0, 1]
        category: paradigmatic, practical, aesthetic or generative
        transformative_potential: Transformative vocabulary score in [0, 1]
        extracted_insight: The step's key sentence
        components: Weighted components behind ``score``
    """

    step_id: str
    sequence_number: int
    score: float
    category: str
    transformative_potential: float
    extracted_insight: str = ""
    components: Optional[BrillianceComponents] = field(default=None, repr=False)


def categorize(text: str) -> str:
    """Classify a step by the first keyword family found in its text."""
    for category, family in CATEGORY_FAMILIES.items():
        if family.any_in(text):
            return category
    return DEFAULT_CATEGORY


def transformative_potential(text: str) -> float:
    """0.15 per distinct transformative indicator, capped at 1.0."""
    return min(1.0, TRANSFORMATIVE.hit_weight(text))


def extract_key_insight(text: str) -> str:
    """Pick the sentence most likely to carry the step's insight.

    Prefers the first sentence longer than 20 characters that contains an
    insight cue ("therefore", "the key insight", ...), then the first long
    sentence, then the first 200 characters.
    """
    sentences = [
        s for s in _SENTENCE_SPLIT_RE.split(text) if len(s.strip()) > _MIN_INSIGHT_SENTENCE
    ]
    for sentence in sentences:
        if INSIGHT_CUES.any_in(sentence):
            return sentence.strip()
    if sentences:
        return sentences[0].strip()
    if len(text) > _INSIGHT_FALLBACK_CHARS:
        return text[:_INSIGHT_FALLBACK_CHARS] + "..."
    return text


class BrillianceScorer:
    """Per-step brilliance scoring orchestrator.

    Combines three metrics with configurable weights:
    - JUDGE (40%): normalised mean of the step's judge scores
    - NOVELTY (30%): conceptual novelty vocabulary
    - COHERENCE (30%): similarity to the most recent preceding steps

    Attributes:
        config: Brilliance configuration with weights and thresholds
        judge: JudgeMetric instance
        novelty: ConceptualNoveltyMetric instance
        coherence: ContextCoherenceMetric instance
    """

    def __init__(self, config: Optional[BrillianceConfig] = None):
        """Initialize brilliance scorer.

        Args:
            config: Brilliance configuration. Uses defaults if None.
        """
        self.config = config or BrillianceConfig()
        self.judge = JudgeMetric(scale=self.config.judge_scale)
        self.novelty = ConceptualNoveltyMetric()
        self.coherence = ContextCoherenceMetric(window=self.config.coherence_window)

    def components(self, step: "Step", preceding: Sequence["Step"]) -> BrillianceComponents:
        """Compute the weighted brilliance components of ``step``."""
        return BrillianceComponents(
            judge=self.judge.compute(step, preceding) * self.config.judge_weight,
            novelty=self.novelty.compute(step, preceding) * self.config.novelty_weight,
            coherence=self.coherence.compute(step, preceding) * self.config.coherence_weight,
        )

    def score(self, step: "Step", preceding: Sequence["Step"]) -> float:
        """Brilliance of ``step`` given the steps before it, in [0, 1]."""
        return self.components(step, preceding).total

    def record(self, step: "Step", preceding: Sequence["Step"]) -> BrillianceRecord:
        """Build the full BrillianceRecord for one step."""
        components = self.components(step, preceding)
        return BrillianceRecord(
            step_id=step.id,
            sequence_number=step.sequence_number,
            score=components.total,
            category=categorize(step.text),
            transformative_potential=transformative_potential(step.text),
            extracted_insight=extract_key_insight(step.text),
            components=components,
        )

    def score_session(self, steps: Sequence["Step"]) -> list[BrillianceRecord]:
        """Score every step against its own preceding steps, in session order."""
        steps = list(steps)
        return [self.record(step, steps[:i]) for i, step in enumerate(steps)]

    def crown_jewels(self, steps: Sequence["Step"]) -> list[BrillianceRecord]:
        """Extract the top brilliance records of a session.

        Keeps the top ``crown_jewel_fraction`` of steps (minimum 1), sorted
        by descending brilliance. Ties keep session order. Empty sessions
        yield an empty list.

        Args:
            steps: Session steps in sequence order

        Returns:
            Crown-jewel records, best first.
        """
        if not steps:
            return []
        return self.top_records(self.score_session(steps))

    def top_records(self, records: Sequence[BrillianceRecord]) -> list[BrillianceRecord]:
        """Top ``crown_jewel_fraction`` of already computed records, best first."""
        if not records:
            return []

        ranked = sorted(records, key=attrgetter("score"), reverse=True)
        keep = max(1, math.floor(len(records) * self.config.crown_jewel_fraction))

        logger.debug(f"Crown jewels: keeping {keep} of {len(records)} steps")
        return ranked[:keep]

"""GlobalPatternDetector: whole-session pattern scan.

Scans a session snapshot for:
- Cascades: a trigger step followed, within a short look-ahead, by several
  high-brilliance steps
- Semantic breakthroughs: steps that jump far from their recent context
  or introduce several concepts never seen before
- Crown jewels: the top brilliance records of the session

Everything is recomputed from the snapshot on every call and nothing is
cached between calls, so re-running over the same steps is idempotent.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Optional, Sequence

from rabbithole.indicators.tables import PARADIGM_SHIFT
from rabbithole.patterns.breakthrough import breakthrough_readiness
from rabbithole.patterns.concepts import extract_concepts
from rabbithole.scoring.brilliance import BrillianceRecord, BrillianceScorer
from rabbithole.scoring.config import BrillianceConfig
from rabbithole.scoring.metrics.novelty import conceptual_novelty
from rabbithole.similarity.lexical import semantic_distance

if TYPE_CHECKING:
    from rabbithole.models import Step

logger = logging.getLogger(__name__)


@dataclass
class PatternConfig:
    """Windows and thresholds for global pattern detection.

    Attributes:
        cascade_lookahead: Steps after a trigger inspected for a cascade
        cascade_min_steps: Qualifying steps required for a cascade
        breakthrough_lookback: Prior steps a breakthrough is measured against
        breakthrough_distance: Mean semantic distance that flags a breakthrough
        novel_concept_min: New concepts that flag a breakthrough
        readiness_window: Steps considered for breakthrough readiness
        brilliance: Brilliance scoring configuration; its
            high_brilliance_threshold decides which steps qualify
    """

    cascade_lookahead: int = 4
    cascade_min_steps: int = 2
    breakthrough_lookback: int = 3
    breakthrough_distance: float = 0.6
    novel_concept_min: int = 3
    readiness_window: int = 5
    brilliance: BrillianceConfig = field(default_factory=BrillianceConfig)

    def __post_init__(self) -> None:
        if self.cascade_lookahead < 1:
            raise ValueError(f"cascade_lookahead must be >= 1, got {self.cascade_lookahead}")
        if self.cascade_min_steps < 1:
            raise ValueError(f"cascade_min_steps must be >= 1, got {self.cascade_min_steps}")
        if self.breakthrough_lookback < 1:
            raise ValueError(
                f"breakthrough_lookback must be >= 1, got {self.breakthrough_lookback}"
            )


@dataclass
class CascadeRecord:
    """A hinge step that precipitates a run of brilliant steps.

    Attributes:
        trigger_step: Sequence number of the hinge step
        cascade_steps: Sequence numbers of the qualifying steps, in order
        momentum: Mean brilliance of the qualifying steps
        depth: Number of qualifying steps
        conceptual_novelty: Vocabulary novelty of the trigger text
    """

    trigger_step: int
    cascade_steps: list[int]
    momentum: float
    depth: int
    conceptual_novelty: float


@dataclass
class SemanticBreakthrough:
    """A large conceptual jump at one step.

    Attributes:
        step_number: Sequence number of the step
        conceptual_distance: Mean semantic distance to the recent steps
        novel_concepts: Concepts absent from every earlier step
        paradigm_shift_intensity: Paradigm-shift vocabulary score in [0, 1]
    """

    step_number: int
    conceptual_distance: float
    novel_concepts: list[str]
    paradigm_shift_intensity: float


@dataclass
class GlobalPatternReport:
    """Everything the global scan found in one session snapshot."""

    crown_jewels: list[BrillianceRecord] = field(default_factory=list)
    cascades: list[CascadeRecord] = field(default_factory=list)
    breakthroughs: list[SemanticBreakthrough] = field(default_factory=list)
    hinge_points: list[int] = field(default_factory=list)
    overall_brilliance: float = 0.0
    breakthrough_readiness: float = 0.0

    def to_dict(self) -> dict:
        data = asdict(self)
        for jewel in data["crown_jewels"]:
            jewel.pop("components", None)
        return data


def paradigm_shift_intensity(text: str) -> float:
    """0.2 per distinct paradigm-shift phrase, capped at 1.0."""
    return min(1.0, PARADIGM_SHIFT.hit_weight(text))


class GlobalPatternDetector:
    """Whole-session cascade, breakthrough and crown-jewel detection.

    Example:
        detector = GlobalPatternDetector()
        report = detector.analyze(ledger.snapshot())
        for cascade in report.cascades:
            print(cascade.trigger_step, cascade.cascade_steps)
    """

    def __init__(
        self,
        config: Optional[PatternConfig] = None,
        scorer: Optional[BrillianceScorer] = None,
    ):
        self.config = config or PatternConfig()
        self.scorer = scorer or BrillianceScorer(self.config.brilliance)

    def analyze(self, steps: Sequence["Step"]) -> GlobalPatternReport:
        """Run every detector over one session snapshot."""
        steps = list(steps)
        if not steps:
            return GlobalPatternReport()

        records = self.scorer.score_session(steps)
        cascades = self._cascades(steps)
        breakthroughs = self.detect_breakthroughs(steps)
        jewels = self.scorer.top_records(records)
        overall = sum(j.score for j in jewels) / len(jewels) if jewels else 0.0

        report = GlobalPatternReport(
            crown_jewels=jewels,
            cascades=cascades,
            breakthroughs=breakthroughs,
            hinge_points=[c.trigger_step for c in cascades],
            overall_brilliance=overall,
            breakthrough_readiness=breakthrough_readiness(
                steps,
                window=self.config.readiness_window,
                scale=self.config.brilliance.judge_scale,
            ),
        )
        logger.info(
            f"Global scan of {len(steps)} steps: {len(cascades)} cascades, "
            f"{len(breakthroughs)} breakthroughs, overall brilliance {overall:.3f}"
        )
        return report

    def detect_cascades(self, steps: Sequence["Step"]) -> list[CascadeRecord]:
        """Find cascades in ``steps``.

        Every step except the last two is tried as a trigger. A following
        step qualifies when its cascade brilliance exceeds the
        high-brilliance threshold.
        """
        return self._cascades(list(steps))

    def cascade_scores(self, steps: Sequence["Step"]) -> list[float]:
        """Brilliance of each step with the step itself closing its context.

        Unlike crown-jewel records, the coherence window here ends at the
        scored step, so a step also counts its own text among the recent
        context.
        """
        steps = list(steps)
        return [self.scorer.score(step, steps[:k + 1]) for k, step in enumerate(steps)]

    def _cascades(self, steps: list["Step"]) -> list[CascadeRecord]:
        threshold = self.config.brilliance.high_brilliance_threshold
        lookahead = self.config.cascade_lookahead
        scores = self.cascade_scores(steps)
        cascades = []

        for i in range(len(steps) - 2):
            following = range(i + 1, min(i + 1 + lookahead, len(steps)))
            qualifying = [k for k in following if scores[k] > threshold]
            if len(qualifying) < self.config.cascade_min_steps:
                continue

            cascades.append(CascadeRecord(
                trigger_step=steps[i].sequence_number,
                cascade_steps=[steps[k].sequence_number for k in qualifying],
                momentum=sum(scores[k] for k in qualifying) / len(qualifying),
                depth=len(qualifying),
                conceptual_novelty=conceptual_novelty(steps[i].text),
            ))

        return cascades

    def detect_breakthroughs(self, steps: Sequence["Step"]) -> list[SemanticBreakthrough]:
        """Find semantic breakthroughs in ``steps``.

        Step ``i`` (from the second on) is a breakthrough when its mean
        semantic distance to the previous few steps exceeds the configured
        distance, or when it introduces enough concepts absent from every
        earlier step.
        """
        steps = list(steps)
        concepts = [extract_concepts(step.text) for step in steps]
        breakthroughs = []
        seen: set[str] = set(concepts[0]) if concepts else set()

        for i in range(1, len(steps)):
            current = steps[i]
            previous = steps[max(0, i - self.config.breakthrough_lookback):i]
            distance = sum(semantic_distance(current.text, p.text) for p in previous) / len(previous)
            novel = [c for c in concepts[i] if c not in seen]

            if distance > self.config.breakthrough_distance or len(novel) >= self.config.novel_concept_min:
                breakthroughs.append(SemanticBreakthrough(
                    step_number=current.sequence_number,
                    conceptual_distance=distance,
                    novel_concepts=novel,
                    paradigm_shift_intensity=paradigm_shift_intensity(current.text),
                ))
            seen.update(concepts[i])

        return breakthroughs

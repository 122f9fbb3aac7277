"""Session trajectory ("consciousness") metrics.

Every metric is a pure function of the step list: recomputing over an
unchanged snapshot gives identical results.

Positions for the spatial metrics (velocity, gravity, entropy) come from
the layout coordinates when any step in the session carries them, and from
embeddings otherwise. Steps without a position are skipped.
"""

import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from rabbithole.similarity.lexical import word_overlap_ratio
from rabbithole.similarity.vectors import euclidean_distance

if TYPE_CHECKING:
    from rabbithole.models import Step

logger = logging.getLogger(__name__)

DIRECTIONS = ("expanding", "converging", "stabilizing", "oscillating", "exploring")

ESCALATING_INNOVATION = "Escalating Innovation"
DEEP_TERRITORY = "Deep Territory"
INSIGHT_CASCADE = "Insight Cascade"


@dataclass
class TrajectoryConfig:
    """Windows and thresholds for trajectory analysis.

    Attributes:
        recent_window: Steps considered for velocity and emergent patterns
        direction_window: Steps whose novelty decides the direction
        stabilizing_range: Novelty range below which the session stabilizes
        gravity_radius: Mean centroid distance at which gravity reaches 0
        max_depth: Cap on the depth metric
        breakthrough_threshold: Breakthrough potential counted as an insight
        deep_threshold: Depth score counted as deep
        deep_min_steps: Deep steps needed for "Deep Territory"
        cascade_min_steps: Insight steps needed for "Insight Cascade"
    """

    recent_window: int = 5
    direction_window: int = 3
    stabilizing_range: float = 2.0
    gravity_radius: float = 100.0
    max_depth: float = 10.0
    breakthrough_threshold: float = 7.0
    deep_threshold: float = 8.0
    deep_min_steps: int = 3
    cascade_min_steps: int = 2

    def __post_init__(self) -> None:
        if self.recent_window < 2:
            raise ValueError(f"recent_window must be >= 2, got {self.recent_window}")
        if self.direction_window < 2:
            raise ValueError(f"direction_window must be >= 2, got {self.direction_window}")


@dataclass(frozen=True)
class TrajectoryMetrics:
    """Trajectory of one session snapshot.

    Attributes:
        depth: Mean depth judge score, capped at 10
        coherence: Mean adjacent word-overlap ratio, scaled to 0-10
        velocity: Mean distance travelled per step over the recent window
        gravity: Closeness of steps to their centroid, 0-10
        entropy: Spread of positions, 0-10
        insight_density: Share of high breakthrough-potential steps, 0-10
        direction: expanding, converging, stabilizing, oscillating or exploring
        emergent_patterns: Rule-based labels over the recent window
    """

    depth: float
    coherence: float
    velocity: float
    gravity: float
    entropy: float
    insight_density: float
    direction: str
    emergent_patterns: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        data = asdict(self)
        data["emergent_patterns"] = list(self.emergent_patterns)
        return data


def _positions(steps: Sequence["Step"]) -> list[Optional[np.ndarray]]:
    """Per-step positions, aligned with ``steps``."""
    if any(step.coordinates is not None for step in steps):
        return [step.coordinate_vector for step in steps]
    return [step.vector for step in steps]


class TrajectoryAnalyzer:
    """Derives TrajectoryMetrics from a session's step list.

    Example:
        analyzer = TrajectoryAnalyzer()
        metrics = analyzer.analyze(ledger.snapshot())
    """

    def __init__(self, config: Optional[TrajectoryConfig] = None):
        self.config = config or TrajectoryConfig()

    def analyze(self, steps: Sequence["Step"]) -> TrajectoryMetrics:
        """Compute all trajectory metrics for ``steps``."""
        steps = list(steps)
        positions = _positions(steps)
        metrics = TrajectoryMetrics(
            depth=self.depth(steps),
            coherence=self.coherence(steps),
            velocity=self.velocity(positions),
            gravity=self.gravity(positions),
            entropy=self.entropy(positions),
            insight_density=self.insight_density(steps),
            direction=self.direction(steps),
            emergent_patterns=tuple(self.emergent_patterns(steps)),
        )
        logger.debug(
            f"Trajectory over {len(steps)} steps: direction={metrics.direction}, "
            f"depth={metrics.depth:.2f}, coherence={metrics.coherence:.2f}"
        )
        return metrics

    def depth(self, steps: Sequence["Step"]) -> float:
        if not steps:
            return 0.0
        mean = sum(step.judge("depth") for step in steps) / len(steps)
        return min(mean, self.config.max_depth)

    def coherence(self, steps: Sequence["Step"]) -> float:
        if len(steps) < 2:
            return 0.0
        ratios = [word_overlap_ratio(a.text, b.text) for a, b in zip(steps, steps[1:])]
        return sum(ratios) / len(ratios) * 10.0

    def direction(self, steps: Sequence["Step"]) -> str:
        window = self.config.direction_window
        if len(steps) < window:
            return "exploring"

        novelty = [step.judge("novelty") for step in steps[-window:]]
        pairs = list(zip(novelty, novelty[1:]))
        if all(b > a for a, b in pairs):
            return "expanding"
        if all(b < a for a, b in pairs):
            return "converging"
        if max(novelty) - min(novelty) < self.config.stabilizing_range:
            return "stabilizing"
        return "oscillating"

    def velocity(self, positions: Sequence[Optional[np.ndarray]]) -> float:
        recent = list(positions)[-self.config.recent_window:]
        if len(recent) < 2:
            return 0.0
        travelled = sum(
            euclidean_distance(a, b)
            for a, b in zip(recent, recent[1:])
            if a is not None and b is not None
        )
        return travelled / max(len(recent) - 1, 1)

    def gravity(self, positions: Sequence[Optional[np.ndarray]]) -> float:
        points = [p for p in positions if p is not None]
        if not points:
            return 0.0
        stacked = np.vstack(points)
        centroid = stacked.mean(axis=0)
        mean_distance = float(np.linalg.norm(stacked - centroid, axis=1).mean())
        return max(0.0, self.config.gravity_radius - mean_distance) / 10.0

    def entropy(self, positions: Sequence[Optional[np.ndarray]]) -> float:
        points = [p for p in positions if p is not None]
        if len(points) < 2:
            return 0.0
        stacked = np.vstack(points)
        centroid = stacked.mean(axis=0)
        variance = float((np.sum((stacked - centroid) ** 2, axis=1)).mean())
        return min(float(np.sqrt(variance)) / 10.0, 10.0)

    def insight_density(self, steps: Sequence["Step"]) -> float:
        if not steps:
            return 0.0
        insights = sum(
            1 for step in steps
            if step.judge("breakthrough_potential") >= self.config.breakthrough_threshold
        )
        return insights / len(steps) * 10.0

    def emergent_patterns(self, steps: Sequence["Step"]) -> list[str]:
        """Rule-based labels over the recent window; labels may co-occur."""
        if len(steps) < 3:
            return []

        recent = list(steps)[-self.config.recent_window:]
        novelty = [step.judge("novelty") for step in recent]
        labels = []

        if all(b >= a for a, b in zip(novelty, novelty[1:])):
            labels.append(ESCALATING_INNOVATION)

        deep = sum(1 for step in recent if step.judge("depth") >= self.config.deep_threshold)
        if deep >= self.config.deep_min_steps:
            labels.append(DEEP_TERRITORY)

        insights = sum(
            1 for step in recent
            if step.judge("breakthrough_potential") >= self.config.breakthrough_threshold
        )
        if insights >= self.config.cascade_min_steps:
            labels.append(INSIGHT_CASCADE)

        return labels


def analyze_trajectory(
    steps: Sequence["Step"],
    config: Optional[TrajectoryConfig] = None,
) -> TrajectoryMetrics:
    """Convenience wrapper around ``TrajectoryAnalyzer(config).analyze(steps)``."""
    return TrajectoryAnalyzer(config).analyze(steps)

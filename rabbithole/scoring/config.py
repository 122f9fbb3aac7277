"""Brilliance scoring configuration.

Defines the weights of the three brilliance components:
- JUDGE (40%): mean of the external judge's scores
- NOVELTY (30%): conceptual novelty and complexity vocabulary
- COHERENCE (30%): lexical/semantic continuity with recent context
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class BrillianceConfig:
    """Configuration for per-step brilliance scoring.

    Component weights must sum to 1.0; they are applied before the
    components are summed and the result clamped to [0, 1].

    Attributes:
        judge_weight: Weight of the normalised judge-score mean
        novelty_weight: Weight of conceptual novelty
        coherence_weight: Weight of coherence with prior steps
        coherence_window: Number of most recent prior steps compared
        judge_scale: Upper bound of the judge-score scale
        crown_jewel_fraction: Share of steps kept as crown jewels
        high_brilliance_threshold: Brilliance above which a step counts
            toward a cascade
    """

    judge_weight: float = 0.4
    novelty_weight: float = 0.3
    coherence_weight: float = 0.3

    coherence_window: int = 3
    judge_scale: float = 10.0
    crown_jewel_fraction: float = 0.05
    high_brilliance_threshold: float = 0.7

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        total = self.judge_weight + self.novelty_weight + self.coherence_weight
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Component weights must sum to 1.0, got {total:.4f}")

        if self.coherence_window < 1:
            raise ValueError(f"coherence_window must be >= 1, got {self.coherence_window}")

        if self.judge_scale <= 0:
            raise ValueError(f"judge_scale must be positive, got {self.judge_scale}")

        if not 0.0 < self.crown_jewel_fraction <= 1.0:
            raise ValueError(
                f"crown_jewel_fraction must be in (0, 1], got {self.crown_jewel_fraction}"
            )

        logger.debug(
            f"BrillianceConfig weights: judge={self.judge_weight}, "
            f"novelty={self.novelty_weight}, coherence={self.coherence_weight}"
        )

"""Per-step brilliance scoring and the heuristic quality judge.

Usage:
    from rabbithole.scoring import BrillianceScorer

    scorer = BrillianceScorer()
    jewels = scorer.crown_jewels(session.steps)
"""

from rabbithole.scoring.brilliance import (
    BRILLIANCE_CATEGORIES,
    BrillianceComponents,
    BrillianceRecord,
    BrillianceScorer,
    categorize,
    extract_key_insight,
    transformative_potential,
)
from rabbithole.scoring.config import BrillianceConfig
from rabbithole.scoring.quality_judge import (
    HeuristicQualityJudge,
    QualityJudgeConfig,
    QualityJudgment,
)

__all__ = [
    "BRILLIANCE_CATEGORIES",
    "BrillianceComponents",
    "BrillianceConfig",
    "BrillianceRecord",
    "BrillianceScorer",
    "HeuristicQualityJudge",
    "QualityJudgeConfig",
    "QualityJudgment",
    "categorize",
    "extract_key_insight",
    "transformative_potential",
]

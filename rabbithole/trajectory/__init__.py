"""Session trajectory analysis and conceptual saturation tracking."""

from rabbithole.trajectory.analyzer import (
    DIRECTIONS,
    TrajectoryAnalyzer,
    TrajectoryConfig,
    TrajectoryMetrics,
    analyze_trajectory,
)
from rabbithole.trajectory.coherence_tracking import CoherenceReport, track_coherence

__all__ = [
    "DIRECTIONS",
    "CoherenceReport",
    "TrajectoryAnalyzer",
    "TrajectoryConfig",
    "TrajectoryMetrics",
    "analyze_trajectory",
    "track_coherence",
]

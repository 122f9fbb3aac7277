"""Global pattern detection: cascades, breakthroughs, crown jewels."""

from rabbithole.patterns.breakthrough import (
    BREAKTHROUGH_THRESHOLDS,
    BreakthroughMetrics,
    analyze_breakthrough_potential,
    breakthrough_readiness,
    should_escalate,
)
from rabbithole.patterns.concepts import extract_concepts
from rabbithole.patterns.detector import (
    CascadeRecord,
    GlobalPatternDetector,
    GlobalPatternReport,
    PatternConfig,
    SemanticBreakthrough,
    paradigm_shift_intensity,
)

__all__ = [
    "BREAKTHROUGH_THRESHOLDS",
    "BreakthroughMetrics",
    "CascadeRecord",
    "GlobalPatternDetector",
    "GlobalPatternReport",
    "PatternConfig",
    "SemanticBreakthrough",
    "analyze_breakthrough_potential",
    "breakthrough_readiness",
    "extract_concepts",
    "paradigm_shift_intensity",
    "should_escalate",
]

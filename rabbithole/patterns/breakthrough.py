"""Breakthrough indicators and breakthrough readiness.

``analyze_breakthrough_potential`` looks for four linguistic markers of a
conceptual breakthrough in a single text. ``breakthrough_readiness`` scores
whether a session is building toward one. Neither has side effects: the
caller decides whether a high readiness should escalate the session mode.
"""

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from rabbithole.indicators.tables import IndicatorSet, phrases
from rabbithole.models import DEFAULT_JUDGE_SCALE

if TYPE_CHECKING:
    from rabbithole.models import Step

# Sensitivity presets for ``BreakthroughMetrics.is_breakthrough``
BREAKTHROUGH_THRESHOLDS: dict[str, float] = {
    "conservative": 0.7,
    "balanced": 0.5,
    "sensitive": 0.3,
}

INDICATOR_WEIGHTS: dict[str, float] = {
    "temporal_displacement": 0.2,
    "assumption_inversion": 0.3,
    "conceptual_leap": 0.25,
    "paradigm_challenge": 0.25,
}

READINESS_ESCALATION_THRESHOLD = 0.7

TEMPORAL_WORDS = phrases("temporal", "1", [
    "centuries", "millennia", "eons", "forever", "eternal", "timeless",
    "prehistoric", "ancestral", "primordial", "temporal", "chronological",
])
TEMPORAL_PHRASES = phrases("temporal_phrases", "1", [
    "future generations", "transcend time", "beyond time",
])
INVERSION_WORDS = phrases("inversion", "1", [
    "suppose", "contrary", "opposite", "inverse", "reverse", "backwards",
    "challenge", "question", "assume", "assumption", "presuppose", "given", "axiom",
])
QUESTIONING_PHRASES = phrases("questioning", "1", [
    "why do we assume", "what if we", "suppose instead", "contrary to",
    "challenge the notion", "question whether", "flip the script",
    "what if", "upside down", "inside out",
])
LEAP_WORDS = phrases("leap", "1", [
    "suddenly", "breakthrough", "revelation", "epiphany", "insight",
    "realization", "paradigm", "shift", "transformation", "metamorphosis",
    "leap", "jump", "bridge", "connection", "synthesis",
])
CONNECTION_PHRASES = phrases("connection", "1", [
    "this connects to", "bridges the gap", "synthesizes", "unifies",
    "brings together", "links", "correlates", "parallels", "resonates",
])
FRAMEWORK_WORDS = phrases("framework", "1", [
    "paradigm", "framework", "model", "system", "structure", "foundation",
    "fundamental", "core", "essence", "nature", "reality", "truth",
    "conventional", "traditional", "established", "accepted", "dogma",
])
CHALLENGE_PHRASES = phrases("challenge", "1", [
    "challenge the", "question the", "rethink", "reconsider", "reexamine",
    "overthrow", "revolutionize", "transform", "redefine", "reconstruct",
])
READINESS_SHIFT_WORDS = phrases("readiness_shift", "1", [
    "paradigm", "fundamentally", "revolutionary",
])

_TIME_REFERENCE_RE = re.compile(
    r"\b(before|after|during|throughout)\s+(human|civilization|history|evolution)",
    re.IGNORECASE,
)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


@dataclass
class BreakthroughMetrics:
    """Breakthrough markers found in one text.

    Attributes:
        indicators: Score per marker in [0, 1]
        overall_score: Weighted sum of markers
        confidence: Mean marker strength scaled by text length
        reasoning: Explanations for markers above 0.3
        threshold: Sensitivity threshold used for ``is_breakthrough``
    """

    indicators: dict[str, float]
    overall_score: float
    confidence: float
    reasoning: list[str] = field(default_factory=list)
    threshold: float = BREAKTHROUGH_THRESHOLDS["balanced"]

    @property
    def is_breakthrough(self) -> bool:
        return self.overall_score >= self.threshold


def _words_containing(words: list[str], table: IndicatorSet) -> int:
    """Number of words containing any phrase of ``table`` as a substring."""
    return sum(1 for word in words if table.any_in(word))


def _split_sentences(text: str) -> list[str]:
    return [s for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]


def detect_indicators(text: str) -> dict[str, float]:
    """Score the four breakthrough markers of ``text``."""
    words = text.lower().split()
    sentences = _split_sentences(text)
    n = max(len(sentences), 1)
    lowered = " ".join(words)

    time_scale = _words_containing(words, TEMPORAL_WORDS) + TEMPORAL_PHRASES.distinct_hits(lowered)
    time_refs = sum(1 for s in sentences if _TIME_REFERENCE_RE.search(s))
    temporal = min(1.0, (time_scale * 0.1 + time_refs * 0.2) / n)

    inversions = _words_containing(words, INVERSION_WORDS)
    questioning = QUESTIONING_PHRASES.distinct_hits(lowered)
    inversion = min(1.0, (inversions * 0.05 + questioning * 0.3) / n)

    leaps = _words_containing(words, LEAP_WORDS)
    connections = CONNECTION_PHRASES.distinct_hits(lowered)
    leap = min(1.0, (leaps * 0.08 + connections * 0.25) / n)

    challenged = sum(
        0.3 for s in sentences if CHALLENGE_PHRASES.any_in(s) and FRAMEWORK_WORDS.any_in(s)
    )
    challenge = min(1.0, challenged / n)

    return {
        "temporal_displacement": temporal,
        "assumption_inversion": inversion,
        "conceptual_leap": leap,
        "paradigm_challenge": challenge,
    }


def _reasoning(indicators: dict[str, float]) -> list[str]:
    explanations = []
    if indicators["temporal_displacement"] > 0.3:
        explanations.append("Demonstrates temporal displacement thinking across multiple time scales")
    if indicators["assumption_inversion"] > 0.3:
        explanations.append("Challenges fundamental assumptions and inverts conventional thinking")
    if indicators["conceptual_leap"] > 0.3:
        explanations.append("Makes non-linear conceptual connections and synthesis")
    if indicators["paradigm_challenge"] > 0.3:
        explanations.append("Directly challenges existing paradigms and frameworks")
    return explanations


def analyze_breakthrough_potential(text: str, sensitivity: str = "balanced") -> BreakthroughMetrics:
    """Analyze ``text`` for breakthrough markers.

    Args:
        text: Text to analyze
        sensitivity: conservative, balanced or sensitive

    Returns:
        BreakthroughMetrics with marker scores and an overall score.

    Raises:
        ValueError: If ``sensitivity`` is not a known preset.
    """
    if sensitivity not in BREAKTHROUGH_THRESHOLDS:
        raise ValueError(
            f"Unknown sensitivity {sensitivity!r}, expected one of {sorted(BREAKTHROUGH_THRESHOLDS)}"
        )

    indicators = detect_indicators(text)
    overall = sum(indicators[name] * weight for name, weight in INDICATOR_WEIGHTS.items())
    mean = sum(indicators.values()) / len(indicators)
    confidence = mean * min(1.0, len(text) / 500)

    return BreakthroughMetrics(
        indicators=indicators,
        overall_score=overall,
        confidence=confidence,
        reasoning=_reasoning(indicators),
        threshold=BREAKTHROUGH_THRESHOLDS[sensitivity],
    )


def breakthrough_readiness(
    steps: Sequence["Step"],
    window: int = 5,
    scale: float = DEFAULT_JUDGE_SCALE,
) -> float:
    """Score whether a session is building toward a breakthrough.

    Over the last ``window`` steps: breakthrough-potential momentum (mean of
    the non-zero scores, once at least three exist), growing step length,
    and shift vocabulary.

    Returns:
        Readiness in [0, 1]; 0.0 for fewer than three steps.
    """
    if len(steps) < 3:
        return 0.0

    recent = list(steps)[-window:]
    readiness = 0.0

    potentials = [p for p in (step.judge("breakthrough_potential") for step in recent) if p > 0]
    if len(potentials) >= 3:
        readiness += (sum(potentials) / len(potentials)) / scale * 0.4

    trend = sum(
        0.1 if len(current.text) > len(previous.text) else -0.05
        for previous, current in zip(recent, recent[1:])
    )
    readiness += max(0.0, trend)

    if any(READINESS_SHIFT_WORDS.any_in(step.text) for step in recent):
        readiness += 0.2

    return min(1.0, readiness)


def should_escalate(readiness: float, threshold: float = READINESS_ESCALATION_THRESHOLD) -> bool:
    """Whether ``readiness`` is high enough to suggest a breakthrough mode."""
    return readiness >= threshold

"""Heuristic multi-dimensional quality judge.

Scores a response on seven dimensions (novelty, coherence, depth,
relevance, creativity, logic, insight) from weighted pattern tables. Used
when a step arrives without scores from an external judge model; its
output converts to JudgeScores on the usual 0-10 scale.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Optional

from rabbithole.indicators.tables import Indicator, IndicatorSet, patterns
from rabbithole.models import DEFAULT_JUDGE_SCALE, JudgeScores

logger = logging.getLogger(__name__)

QUALITY_DIMENSIONS = ("novelty", "coherence", "depth", "relevance", "creativity", "logic", "insight")

DEFAULT_QUALITY_WEIGHTS: dict[str, float] = {
    "novelty": 0.20,
    "coherence": 0.20,
    "depth": 0.15,
    "relevance": 0.15,
    "creativity": 0.10,
    "logic": 0.10,
    "insight": 0.10,
}


def _weighted(name: str, table: list[tuple[str, float]]) -> IndicatorSet:
    return IndicatorSet(
        name, "1", tuple(Indicator(source, weight, regex=True) for source, weight in table)
    )


NOVELTY_PATTERNS = _weighted("judge_novelty", [
    (r"\b(paradigm|framework|reconceptualize|reframe)\b", 0.2),
    (r"\b(unprecedented|breakthrough|revolutionary)\b", 0.25),
    (r"\b(synthesis|emergence|transcend)\b", 0.15),
    (r"\b(connects|bridges|unifies|integrates)\b", 0.1),
    (r"\b(perspective|viewpoint|lens|angle)\b", 0.1),
    (r"\b(centuries|millennia|eons|timeless)\b", 0.2),
])

DEPTH_PATTERNS = _weighted("judge_depth", [
    (r"\b(fundamental|underlying|essential|core|root)\b", 0.15),
    (r"\b(because|since|due to|results in|leads to)\b", 0.1),
    (r"\b(implies|suggests|indicates|reveals|demonstrates)\b", 0.1),
    (r"\b(essence|nature|being|existence|reality)\b", 0.15),
    (r"\b(consciousness|experience|meaning|purpose|truth)\b", 0.2),
])

CREATIVITY_PATTERNS = _weighted("judge_creativity", [
    (r"\b(imagine|suppose|envision|picture)\b", 0.15),
    (r"\b(like|as if|metaphor|analogy|similar to)\b", 0.2),
    (r"\b(connects|links|bridges|weaves together)\b", 0.15),
    (r"\b(what if|suppose|consider if|imagine that)\b", 0.25),
    (r"\b(uniquely|originally|innovatively|creatively)\b", 0.1),
])

LOGIC_PATTERNS = _weighted("judge_logic", [
    (r"\b(if|then|when|unless|provided that)\b", 0.15),
    (r"\b(because|therefore|thus|hence|consequently)\b", 0.2),
    (r"\b(premise|conclusion|argument|reasoning)\b", 0.15),
    (r"\b(evidence|proof|demonstrates|shows that)\b", 0.15),
    (r"\b(follows|implies|leads to|results in)\b", 0.1),
])

INSIGHT_PATTERNS = _weighted("judge_insight", [
    (r"\b(insight|revelation|realization|understanding)\b", 0.2),
    (r"\b(hidden|underlying|beneath|deeper)\b", 0.15),
    (r"\b(transforms|changes|shifts|alters)\b", 0.1),
    (r"\b(breakthrough|paradigm|revolutionary|profound)\b", 0.25),
    (r"\b(wisdom|enlightenment|clarity|illumination)\b", 0.15),
])

RELEVANCE_PATTERNS = patterns("judge_relevance", "1", [
    r"\b(this question|the question|addressing|responds to)\b",
    r"\b(why|how|what|when|where|whether)\b",
    r"\b(regarding|concerning|about|relates to)\b",
])

_CONCLUSION_RE = re.compile(r"\b(therefore|thus|hence|in conclusion|ultimately)\b", re.IGNORECASE)
_TRANSITION_RE = re.compile(r"\b(however|moreover|furthermore|additionally|consequently)\b", re.IGNORECASE)
_FLOW_RE = re.compile(r"\b(because|since|therefore|thus|consequently|as a result)\b", re.IGNORECASE)
_SUPERFICIAL_RE = re.compile(r"\b(simply|just|merely|only|basic)\b", re.IGNORECASE)
_FALLACY_RE = re.compile(r"\b(always|never|all|none|everyone|no one)\b", re.IGNORECASE)
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_NON_WORD_RE = re.compile(r"[^\w\s]")

STOP_WORDS = frozenset({
    "this", "that", "with", "have", "will", "from", "they", "know",
    "want", "been", "good", "much", "some", "time", "very", "when",
    "come", "here", "just", "like", "long", "make", "many", "over",
    "such", "take", "than", "them", "well", "were",
})


@dataclass
class QualityJudgeConfig:
    """Weights and thresholds for the heuristic judge.

    Weights are normalised to sum to 1.0 on construction.

    Attributes:
        weights: Per-dimension weight of the overall score
        high_quality: Overall score at or above which a response is high quality
        low_quality: Overall score at or below which revision is suggested
        incoherence: Coherence below this is a risk factor
        irrelevance: Relevance below this is a risk factor
        shallowness: Depth below this is a risk factor
    """

    weights: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_QUALITY_WEIGHTS))
    high_quality: float = 0.75
    low_quality: float = 0.40
    incoherence: float = 0.30
    irrelevance: float = 0.40
    shallowness: float = 0.35

    def __post_init__(self) -> None:
        unknown = set(self.weights) - set(QUALITY_DIMENSIONS)
        if unknown:
            raise ValueError(f"Unknown quality dimensions: {sorted(unknown)}")
        merged = {name: self.weights.get(name, DEFAULT_QUALITY_WEIGHTS[name]) for name in QUALITY_DIMENSIONS}
        total = sum(merged.values())
        if total <= 0:
            raise ValueError(f"Quality weights must sum to a positive value, got {total}")
        self.weights = {name: weight / total for name, weight in merged.items()}


@dataclass
class QualityJudgment:
    """Result of judging one response.

    Attributes:
        dimensions: Score per dimension in [0, 1]
        overall_score: Weighted sum of dimensions
        confidence: Length- and consistency-based confidence in [0, 1]
        is_high_quality: Whether overall_score reaches the high-quality threshold
        feedback: Improvement suggestions
        risk_factors: Detected weaknesses
    """

    dimensions: dict[str, float]
    overall_score: float
    confidence: float
    is_high_quality: bool
    feedback: list[str] = field(default_factory=list)
    risk_factors: list[str] = field(default_factory=list)

    def to_judge_scores(self, scale: float = DEFAULT_JUDGE_SCALE) -> JudgeScores:
        """Express the dimensions as JudgeScores on ``scale``."""
        return JudgeScores(**{name: value * scale for name, value in self.dimensions.items()})


def extract_keywords(text: str) -> list[str]:
    """Lowercased words longer than 3 characters, stop words removed."""
    words = _NON_WORD_RE.sub(" ", text.lower()).split()
    return [word for word in words if len(word) > 3 and word not in STOP_WORDS]


class HeuristicQualityJudge:
    """Pattern-table quality judge.

    Example:
        judge = HeuristicQualityJudge()
        judgment = judge.judge(response_text, question)
        step = step.with_judge_scores(judgment.to_judge_scores())
    """

    def __init__(self, config: Optional[QualityJudgeConfig] = None):
        self.config = config or QualityJudgeConfig()

    def judge(self, response: str, question: str = "") -> QualityJudgment:
        """Judge one response.

        Args:
            response: Text to judge
            question: The question the response should address

        Returns:
            QualityJudgment with per-dimension scores and feedback.
        """
        dimensions = {
            "novelty": self.assess_novelty(response),
            "coherence": self.assess_coherence(response),
            "depth": self.assess_depth(response),
            "relevance": self.assess_relevance(response, question),
            "creativity": self.assess_creativity(response),
            "logic": self.assess_logic(response),
            "insight": self.assess_insight(response),
        }
        overall = sum(value * self.config.weights[name] for name, value in dimensions.items())
        confidence = self._confidence(dimensions, response)

        judgment = QualityJudgment(
            dimensions=dimensions,
            overall_score=overall,
            confidence=confidence,
            is_high_quality=overall >= self.config.high_quality,
            feedback=self._feedback(dimensions, overall),
            risk_factors=self._risk_factors(dimensions),
        )
        logger.debug(f"Judged response: overall={overall:.3f}, confidence={confidence:.3f}")
        return judgment

    def assess_novelty(self, response: str) -> float:
        return min(1.0, 0.3 + NOVELTY_PATTERNS.weighted_count(response) * 0.1)

    def assess_coherence(self, response: str) -> float:
        sentences = [s for s in _SENTENCE_SPLIT_RE.split(response) if len(s.strip()) > 10]
        if not sentences:
            return 0.0

        # Base plus structure: an opening sentence exists
        score = 0.6
        if _CONCLUSION_RE.search(response):
            score += 0.15
        score += min(len(_TRANSITION_RE.findall(response)) * 0.05, 0.2)
        score += min(len(_FLOW_RE.findall(response)) * 0.03, 0.15)
        return min(score, 1.0)

    def assess_depth(self, response: str) -> float:
        score = 0.2 + DEPTH_PATTERNS.weighted_count(response) * 0.05
        score -= len(_SUPERFICIAL_RE.findall(response)) * 0.05
        return max(0.0, min(score, 1.0))

    def assess_relevance(self, response: str, question: str) -> float:
        question_words = extract_keywords(question)
        if not question_words:
            return 0.5

        response_words = set(extract_keywords(response))
        overlap = sum(1 for word in question_words if word in response_words)
        score = overlap / len(question_words)
        score += 0.1 * RELEVANCE_PATTERNS.distinct_hits(response)
        return min(score, 1.0)

    def assess_creativity(self, response: str) -> float:
        return min(1.0, 0.2 + CREATIVITY_PATTERNS.weighted_count(response) * 0.1)

    def assess_logic(self, response: str) -> float:
        score = 0.3 + LOGIC_PATTERNS.weighted_count(response) * 0.05
        score -= len(_FALLACY_RE.findall(response)) * 0.02
        return max(0.0, min(score, 1.0))

    def assess_insight(self, response: str) -> float:
        return min(1.0, 0.25 + INSIGHT_PATTERNS.weighted_count(response) * 0.1)

    def _confidence(self, dimensions: dict[str, float], response: str) -> float:
        length_score = min(len(response.split()) / 100, 1.0)
        values = list(dimensions.values())
        mean = sum(values) / len(values)
        variance = sum((value - mean) ** 2 for value in values) / len(values)
        consistency = max(0.0, 1.0 - math.sqrt(variance))
        return length_score * 0.3 + consistency * 0.7

    def _feedback(self, dimensions: dict[str, float], overall: float) -> list[str]:
        feedback = []
        if overall >= self.config.high_quality:
            feedback.append("Excellent overall quality with strong philosophical depth")
        elif overall <= self.config.low_quality:
            feedback.append("Response quality below standards - consider revision")

        if dimensions["novelty"] < 0.4:
            feedback.append("Consider adding more original perspectives")
        if dimensions["coherence"] < 0.5:
            feedback.append("Improve logical flow and structure")
        if dimensions["depth"] < 0.4:
            feedback.append("Explore fundamental concepts more deeply")
        if dimensions["relevance"] < 0.5:
            feedback.append("Better address the core question")
        if dimensions["creativity"] < 0.3:
            feedback.append("Add more imaginative elements or analogies")
        if dimensions["logic"] < 0.4:
            feedback.append("Strengthen reasoning and evidence")
        if dimensions["insight"] < 0.3:
            feedback.append("Seek deeper philosophical insights")
        return feedback

    def _risk_factors(self, dimensions: dict[str, float]) -> list[str]:
        risks = []
        if dimensions["coherence"] < self.config.incoherence:
            risks.append("Incoherent reasoning - may confuse readers")
        if dimensions["relevance"] < self.config.irrelevance:
            risks.append("Off-topic response - does not address question")
        if dimensions["depth"] < self.config.shallowness:
            risks.append("Superficial analysis - lacks philosophical depth")
        if dimensions["logic"] < 0.3:
            risks.append("Weak logical foundation - arguments may not hold")
        return risks

"""Embedding novelty of a response against the session's accepted history.

Four factors are blended into an overall novelty:
- Conceptual distance: cosine distance to the closest historical embedding
- Historical similarity: mean cosine similarity to the recent history
  (inverted before weighting)
- Domain crossing: share of domain keyword hits outside the current domain
- Linguistic novelty: metaphor, neologism and paradox markers per word

The history is passed in on every call, so the same inputs always give the
same metrics.

Usage:
    history = [HistoricalEmbedding(step.vector) for step in snapshot if step.vector is not None]
    metrics = analyze_novelty(candidate.text, candidate.vector, history, domain="ethics")
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from rabbithole.indicators.tables import DOMAIN_KEYWORDS, LINGUISTIC_NOVELTY, IndicatorSet
from rabbithole.similarity.vectors import HistoricalEmbedding, cosine_similarity

logger = logging.getLogger(__name__)

NOVELTY_WEIGHTS: dict[str, float] = {
    "conceptual": 0.4,
    "historical": 0.3,
    "domain": 0.2,
    "linguistic": 0.1,
}


@dataclass
class NoveltyConfig:
    """Thresholds and windows for embedding novelty.

    Attributes:
        breakthrough_threshold: Overall novelty at which a response counts
            as a breakthrough
        max_history_size: Most recent embeddings compared against
        recent_window: Embeddings averaged for historical similarity
        unknown_domain_crossing: Domain crossing reported when no domain is given
    """

    breakthrough_threshold: float = 0.75
    max_history_size: int = 100
    recent_window: int = 10
    unknown_domain_crossing: float = 0.5

    def __post_init__(self) -> None:
        if not 0.0 < self.breakthrough_threshold <= 1.0:
            raise ValueError(
                f"breakthrough_threshold must be in (0, 1], got {self.breakthrough_threshold}"
            )
        if self.max_history_size < 1:
            raise ValueError(f"max_history_size must be >= 1, got {self.max_history_size}")
        if self.recent_window < 1:
            raise ValueError(f"recent_window must be >= 1, got {self.recent_window}")


@dataclass(frozen=True)
class NoveltyMetrics:
    """Novelty factors of one response, each in [0, 1]."""

    conceptual_distance: float
    historical_similarity: float
    domain_crossing: float
    linguistic_novelty: float
    overall_novelty: float
    is_breakthrough: bool


def conceptual_distance(embedding, history: Sequence[HistoricalEmbedding]) -> float:
    """Cosine distance to the closest historical embedding, capped at 1.0.

    1.0 for an empty history.
    """
    if not history:
        return 1.0
    closest = min(1.0 - cosine_similarity(embedding, item.vector) for item in history)
    return min(closest, 1.0)


def historical_similarity(
    embedding,
    history: Sequence[HistoricalEmbedding],
    window: int = 10,
) -> float:
    """Mean cosine similarity to the last ``window`` embeddings; 0.0 when empty."""
    recent = list(history)[-window:]
    if not recent:
        return 0.0
    return sum(cosine_similarity(embedding, item.vector) for item in recent) / len(recent)


def domain_crossing(
    text: str,
    domain: Optional[str] = None,
    domains: Optional[dict[str, IndicatorSet]] = None,
    unknown: float = 0.5,
) -> float:
    """Share of domain keyword hits that fall outside ``domain``.

    Returns ``unknown`` when no domain is given and 0.0 when no keyword of
    any domain appears.
    """
    if not domain:
        return unknown

    domains = DOMAIN_KEYWORDS if domains is None else domains
    total = 0
    crossing = 0
    for name, keywords in domains.items():
        hits = keywords.distinct_hits(text)
        total += hits
        if name != domain:
            crossing += hits

    if total == 0:
        return 0.0
    return crossing / total


def linguistic_novelty(text: str, markers: IndicatorSet = LINGUISTIC_NOVELTY) -> float:
    """Novelty markers per tenth of the word count, capped at 1.0."""
    words = len(text.split())
    return min(markers.count(text) / max(words * 0.1, 1.0), 1.0)


def analyze_novelty(
    text: str,
    embedding,
    history: Sequence[HistoricalEmbedding],
    domain: Optional[str] = None,
    config: Optional[NoveltyConfig] = None,
) -> NoveltyMetrics:
    """Score the novelty of a response against earlier embeddings.

    Args:
        text: Response text
        embedding: Response embedding
        history: Earlier embeddings of the session, oldest first
        domain: Domain the session is exploring, if known
        config: Thresholds (defaults if None)

    Returns:
        NoveltyMetrics with every factor and the weighted overall novelty.

    Raises:
        DimensionMismatch: If ``embedding`` and a historical vector differ
            in length.
    """
    config = config or NoveltyConfig()
    history = list(history)[-config.max_history_size:]

    distance = conceptual_distance(embedding, history)
    similarity = historical_similarity(embedding, history, window=config.recent_window)
    crossing = domain_crossing(text, domain, unknown=config.unknown_domain_crossing)
    linguistic = linguistic_novelty(text)

    overall = (
        NOVELTY_WEIGHTS["conceptual"] * distance
        + NOVELTY_WEIGHTS["historical"] * (1.0 - similarity)
        + NOVELTY_WEIGHTS["domain"] * crossing
        + NOVELTY_WEIGHTS["linguistic"] * linguistic
    )

    logger.debug(
        f"Novelty {overall:.3f} (distance {distance:.3f}, similarity {similarity:.3f}, "
        f"crossing {crossing:.2f}, linguistic {linguistic:.2f}) over {len(history)} embeddings"
    )
    return NoveltyMetrics(
        conceptual_distance=distance,
        historical_similarity=similarity,
        domain_crossing=crossing,
        linguistic_novelty=linguistic,
        overall_novelty=overall,
        is_breakthrough=overall >= config.breakthrough_threshold,
    )

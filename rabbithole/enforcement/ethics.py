"""Ethics-risk assessment (the kill-switch phase)."""

import logging
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from rabbithole.enforcement.config import EnforcementConfig
from rabbithole.indicators.tables import ETHICS_KEYWORDS, ETHICS_RISK_PATTERNS, IndicatorSet

logger = logging.getLogger(__name__)


class EthicsAssessment(BaseModel):
    """Ethics risk of one candidate text."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "frozen": True}

    risk_score: float = Field(ge=0.0, le=1.0)
    detected_risks: list[str] = Field(default_factory=list)
    should_kill: bool = False
    mitigation_required: bool = False


def assess_ethics(
    text: str,
    config: Optional[EnforcementConfig] = None,
    keywords: IndicatorSet = ETHICS_KEYWORDS,
    risk_patterns: IndicatorSet = ETHICS_RISK_PATTERNS,
) -> EthicsAssessment:
    """Score the ethics risk of ``text``.

    Every keyword occurrence adds its weight (0.1); every risk pattern that
    matches at least once adds its weight (0.3) regardless of how often it
    matches. The sum is capped at 1.0.

    Args:
        text: Candidate text
        config: Thresholds (defaults if None)

    Returns:
        EthicsAssessment with the risk score and the kill/mitigation flags.
    """
    config = config or EnforcementConfig()
    risk = 0.0
    detected = []

    for indicator in keywords:
        matches = indicator.count(text)
        if matches:
            risk += matches * indicator.weight
            detected.append(f"{indicator.pattern}: {matches} mentions")

    for index, indicator in enumerate(risk_patterns, start=1):
        matches = indicator.count(text)
        if matches:
            risk += indicator.weight
            detected.append(f"Risk pattern {index}: {matches} matches")

    risk = min(risk, 1.0)
    assessment = EthicsAssessment(
        risk_score=risk,
        detected_risks=detected,
        should_kill=risk > config.ethics_risk_threshold,
        mitigation_required=risk > config.mitigation_threshold,
    )
    logger.debug(f"Ethics risk {risk:.2f} ({len(detected)} signals)")
    return assessment

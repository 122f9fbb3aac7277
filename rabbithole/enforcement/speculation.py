"""Speculation, jargon and evidence analysis (the auto-purge phase)."""

import logging
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from rabbithole.enforcement.config import EnforcementConfig
from rabbithole.indicators.scanner import scan_indicators
from rabbithole.indicators.tables import EVIDENCE, JARGON, SPECULATION

logger = logging.getLogger(__name__)

REPLACE_SPECULATION = "Replace speculation with concrete evidence"
SIMPLIFY_JARGON = "Simplify jargon and use accessible language"
ADD_CITATIONS = "Add citations and empirical support"


class SpeculationAnalysis(BaseModel):
    """Speculation, jargon and evidence levels of one candidate text.

    Percentages are matches per total words x 100 and are not capped.
    """

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "frozen": True}

    speculation_percentage: float = Field(ge=0.0)
    jargon_density: float = Field(ge=0.0)
    evidence_score: float = Field(ge=0.0, le=10.0)
    should_purge: bool = False
    required_improvements: list[str] = Field(default_factory=list)


def analyze_speculation(text: str, config: Optional[EnforcementConfig] = None) -> SpeculationAnalysis:
    """Measure speculation, jargon and evidence in ``text``.

    Args:
        text: Candidate text
        config: Thresholds (defaults if None)

    Returns:
        SpeculationAnalysis. ``evidence_score`` is the evidence percentage
        scaled x10 and capped at 10.
    """
    config = config or EnforcementConfig()
    profile = scan_indicators(text, (SPECULATION, JARGON, EVIDENCE))

    speculation = profile.percentage(SPECULATION.name)
    jargon = profile.percentage(JARGON.name)
    evidence = min(profile.percentage(EVIDENCE.name) * 10.0, 10.0)

    improvements = []
    if speculation > config.speculation_threshold:
        improvements.append(REPLACE_SPECULATION)
    if jargon > config.jargon_limit_percentage:
        improvements.append(SIMPLIFY_JARGON)
    if evidence < config.evidence_requirement:
        improvements.append(ADD_CITATIONS)

    logger.debug(
        f"Speculation {speculation:.1f}%, jargon {jargon:.1f}%, evidence score {evidence:.1f}"
    )
    return SpeculationAnalysis(
        speculation_percentage=speculation,
        jargon_density=jargon,
        evidence_score=evidence,
        should_purge=speculation > config.speculation_threshold,
        required_improvements=improvements,
    )

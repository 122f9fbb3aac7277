"""Research enforcement configuration.

Defaults are the "ruthless" thresholds: more than 30% speculation purges a
step, an ethics risk above 0.7 kills it, and anything scoring under 7.0
overall is rejected.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from rabbithole.settings import Settings


@dataclass
class EnforcementConfig:
    """Thresholds for the research enforcement gate.

    Attributes:
        speculation_threshold: Speculation percentage above which a step is purged
        ethics_risk_threshold: Ethics risk above which a step is killed
        mitigation_threshold: Ethics risk above which mitigation is required
        evidence_requirement: Minimum evidence score (0-10)
        citation_minimum: Minimum well-formed citations expected
        jargon_limit_percentage: Jargon percentage above which simplification is required
        min_overall_score: Overall research score required for acceptance
        auto_kill_enabled: Short-circuit on kill/purge instead of scoring every phase
    """

    speculation_threshold: float = 30.0
    ethics_risk_threshold: float = 0.7
    mitigation_threshold: float = 0.3
    evidence_requirement: float = 7.0
    citation_minimum: int = 2
    jargon_limit_percentage: float = 20.0
    min_overall_score: float = 7.0
    auto_kill_enabled: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not 0.0 <= self.ethics_risk_threshold <= 1.0:
            raise ValueError(
                f"ethics_risk_threshold must be in [0, 1], got {self.ethics_risk_threshold}"
            )
        if not 0.0 <= self.mitigation_threshold <= 1.0:
            raise ValueError(
                f"mitigation_threshold must be in [0, 1], got {self.mitigation_threshold}"
            )
        if not 0.0 <= self.min_overall_score <= 10.0:
            raise ValueError(f"min_overall_score must be in [0, 10], got {self.min_overall_score}")
        if self.speculation_threshold < 0 or self.jargon_limit_percentage < 0:
            raise ValueError("Percentage thresholds must be non-negative")
        if self.citation_minimum < 0:
            raise ValueError(f"citation_minimum must be >= 0, got {self.citation_minimum}")

    @classmethod
    def from_settings(cls, settings: Optional["Settings"] = None) -> "EnforcementConfig":
        """Build a config from process settings (environment / .env)."""
        if settings is None:
            from rabbithole.settings import get_settings

            settings = get_settings()
        return cls(
            speculation_threshold=settings.speculation_threshold,
            ethics_risk_threshold=settings.ethics_risk_threshold,
            evidence_requirement=settings.evidence_requirement,
            citation_minimum=settings.citation_minimum,
            jargon_limit_percentage=settings.jargon_limit_percentage,
            min_overall_score=settings.min_overall_score,
            auto_kill_enabled=settings.auto_kill_enabled,
        )

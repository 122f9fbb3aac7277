"""EnforcementEngine: the accept/purge/kill gate for candidate steps.

Phases run in order and may short-circuit:
1. Ethics risk: a kill ends evaluation when auto-kill is enabled
2. Speculation / jargon / evidence: a purge ends evaluation likewise
3. Claim and citation verification (pluggable verifier)
4. Composite research score and decision

Every candidate ends in exactly one terminal state. Kills and purges are
verdicts, not exceptions; only malformed input raises.
"""

import logging
import math
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, ValidationError
from pydantic.alias_generators import to_camel

from rabbithole.enforcement.config import EnforcementConfig
from rabbithole.enforcement.ethics import EthicsAssessment, assess_ethics
from rabbithole.enforcement.speculation import (
    ADD_CITATIONS,
    SpeculationAnalysis,
    analyze_speculation,
)
from rabbithole.enforcement.verification import HeuristicVerifier, VerificationResult, Verifier
from rabbithole.errors import InvalidInput, ProviderError

logger = logging.getLogger(__name__)

ETHICAL_VIOLATION = "ethical_violation"
EXCESSIVE_SPECULATION = "excessive_speculation"
LOW_RESEARCH_SCORE = "low_research_score"
INSUFFICIENT_DATA = "insufficient_data"

KILLED_RECOMMENDATION = "KILLED: Ethical red lines crossed. Regenerate with ethical guardrails."
PURGED_RECOMMENDATION = (
    "PURGED: Ground in evidence or fail. Regenerate with concrete examples and citations."
)
KILL_SWITCH_RECOMMENDATION = (
    "ETHICAL KILL-SWITCH ACTIVATED: Content violates ethical guidelines. "
    "Complete regeneration required."
)
AUTO_PURGE_RECOMMENDATION = (
    "AUTO-PURGE TRIGGERED: Excessive speculation detected. Ground in evidence and regenerate."
)
INSUFFICIENT_DATA_RECOMMENDATION = (
    "Verification unavailable: insufficient data. Treat as requiring improvement and resubmit."
)


class VerdictState(str, Enum):
    """Lifecycle of one candidate step."""
    PENDING = "pending"
    KILLED = "killed"
    PURGED = "purged"
    REJECTED = "rejected"
    ACCEPTED = "accepted"


def round_half_up(value: float, digits: int = 1) -> float:
    """Round halves away from zero for positive values (0.25 -> 0.3)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class EnforcementVerdict(BaseModel):
    """Decision for one candidate step, with the phase breakdowns behind it.

    Phases that did not run (after a kill or purge) leave their breakdown
    as None.
    """

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "frozen": True}

    accept: bool
    killed: bool = False
    purged: bool = False
    overall_score: float = Field(default=0.0, ge=0.0, le=10.0)
    reasons: list[str] = Field(default_factory=list)
    state: VerdictState = VerdictState.PENDING
    recommendation: str = ""

    ethics: Optional[EthicsAssessment] = None
    speculation: Optional[SpeculationAnalysis] = None
    verification: Optional[VerificationResult] = None


class EnforcementRequest(BaseModel):
    """Incoming enforcement request payload."""

    model_config = {"populate_by_name": True}

    text: str = Field(min_length=1)
    mode: str = "exploration"
    step_number: Optional[int] = Field(
        default=None,
        ge=1,
        validation_alias=AliasChoices("step_number", "stepNumber"),
    )
    session_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("session_id", "sessionId", "rabbitHoleId"),
    )


def composite_score(
    ethics: EthicsAssessment,
    speculation: SpeculationAnalysis,
    verification: VerificationResult,
) -> float:
    """Overall research score on a 0-10 scale, rounded to one decimal."""
    ethics_score = (1.0 - ethics.risk_score) * 10.0
    speculation_score = max(0.0, 10.0 - speculation.speculation_percentage / 3.0)
    verification_score = (verification.factual_accuracy + verification.verification_score) / 2.0
    raw = (ethics_score + speculation_score + speculation.evidence_score + verification_score) / 4.0
    return round_half_up(raw, 1)


class EnforcementEngine:
    """Sequential research-quality gate.

    Example:
        engine = EnforcementEngine()
        verdict = engine.evaluate(candidate_text)
        if verdict.accept:
            ledger.append(step)
    """

    def __init__(
        self,
        config: Optional[EnforcementConfig] = None,
        verifier: Optional[Verifier] = None,
    ):
        self.config = config or EnforcementConfig()
        self.verifier = verifier or HeuristicVerifier()

    def evaluate(
        self,
        text: str,
        step_number: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> EnforcementVerdict:
        """Run the gate over one candidate text.

        Args:
            text: Candidate step text
            step_number: Sequence number the step would take (for logging)
            session_id: Owning session (for logging)

        Returns:
            EnforcementVerdict in a terminal state.

        Raises:
            InvalidInput: If ``text`` is empty or whitespace only.
        """
        if not text or not text.strip():
            raise InvalidInput("Candidate text must not be empty")

        label = f"step {step_number} of session {session_id}"
        config = self.config

        ethics = assess_ethics(text, config)
        if config.auto_kill_enabled and ethics.should_kill:
            logger.info(f"Enforcement killed {label}: ethics risk {ethics.risk_score:.2f}")
            return EnforcementVerdict(
                accept=False,
                killed=True,
                reasons=[ETHICAL_VIOLATION],
                state=VerdictState.KILLED,
                recommendation=KILLED_RECOMMENDATION,
                ethics=ethics,
            )

        speculation = analyze_speculation(text, config)
        if config.auto_kill_enabled and speculation.should_purge:
            logger.info(
                f"Enforcement purged {label}: "
                f"{speculation.speculation_percentage:.1f}% speculation"
            )
            return EnforcementVerdict(
                accept=False,
                purged=True,
                reasons=[EXCESSIVE_SPECULATION],
                state=VerdictState.PURGED,
                recommendation=PURGED_RECOMMENDATION,
                ethics=ethics,
                speculation=speculation,
            )

        try:
            verification = self.verifier.verify(text)
        except ProviderError as e:
            logger.warning(f"Verifier unavailable for {label}: {e}")
            return EnforcementVerdict(
                accept=False,
                reasons=[INSUFFICIENT_DATA],
                state=VerdictState.REJECTED,
                recommendation=INSUFFICIENT_DATA_RECOMMENDATION,
                ethics=ethics,
                speculation=speculation,
            )

        overall = composite_score(ethics, speculation, verification)
        verdict = self._decide(overall, ethics, speculation, verification)
        logger.info(
            f"Enforcement {verdict.state.value} {label}: score {overall:g}/10"
        )
        return verdict

    def _decide(
        self,
        overall: float,
        ethics: EthicsAssessment,
        speculation: SpeculationAnalysis,
        verification: VerificationResult,
    ) -> EnforcementVerdict:
        low_score = overall < self.config.min_overall_score

        reasons = []
        if ethics.should_kill:
            reasons.append(ETHICAL_VIOLATION)
        if speculation.should_purge:
            reasons.append(EXCESSIVE_SPECULATION)
        if low_score:
            reasons.append(LOW_RESEARCH_SCORE)

        improvements = list(speculation.required_improvements)
        if verification.citations_found < self.config.citation_minimum and ADD_CITATIONS not in improvements:
            improvements.append(ADD_CITATIONS)

        if ethics.should_kill:
            state, recommendation = VerdictState.KILLED, KILL_SWITCH_RECOMMENDATION
        elif speculation.should_purge:
            state, recommendation = VerdictState.PURGED, AUTO_PURGE_RECOMMENDATION
        elif low_score:
            state = VerdictState.REJECTED
            recommendation = (
                f"Research quality insufficient ({overall:g}/10). "
                f"Required improvements: {', '.join(improvements)}"
            )
        else:
            state = VerdictState.ACCEPTED
            recommendation = f"Research quality acceptable ({overall:g}/10). Continue with current rigor."

        return EnforcementVerdict(
            accept=state is VerdictState.ACCEPTED,
            killed=ethics.should_kill,
            purged=speculation.should_purge,
            overall_score=overall,
            reasons=reasons,
            state=state,
            recommendation=recommendation,
            ethics=ethics,
            speculation=speculation,
            verification=verification,
        )


def build_response(verdict: EnforcementVerdict) -> dict[str, Any]:
    """JSON-shaped response body for a verdict."""
    body: dict[str, Any] = {
        "success": verdict.accept,
        "verdict": verdict.model_dump(
            mode="json",
            by_alias=True,
            exclude={"ethics", "speculation", "verification"},
        ),
        "ethicsAssessment": verdict.ethics.model_dump(by_alias=True) if verdict.ethics else None,
        "researchScore": verdict.overall_score,
        "recommendation": verdict.recommendation,
    }
    if verdict.speculation is not None:
        body["speculationAnalysis"] = verdict.speculation.model_dump(by_alias=True)
    if verdict.verification is not None:
        body["verificationResult"] = verdict.verification.model_dump(by_alias=True)
    return body


def handle_request(
    payload: dict[str, Any],
    engine: Optional[EnforcementEngine] = None,
) -> tuple[int, dict[str, Any]]:
    """Serve one enforcement request.

    Args:
        payload: Request body with ``text``, ``mode``, ``stepNumber`` and
            ``sessionId`` (``rabbitHoleId`` is accepted as an alias)
        engine: Engine to use (a default engine if None)

    Returns:
        (status, body). 200 with the verdict and breakdowns; 400 with
        ``success: false`` for malformed requests; 500 with
        ``success: false`` for internal failures.
    """
    try:
        request = EnforcementRequest.model_validate(payload)
    except ValidationError as e:
        logger.info(f"Rejected malformed enforcement request: {e.error_count()} errors")
        return 400, {"success": False, "error": str(e)}

    engine = engine or EnforcementEngine()
    logger.info(
        f"Analyzing step {request.step_number} for session {request.session_id} "
        f"(mode {request.mode})"
    )

    try:
        verdict = engine.evaluate(
            request.text,
            step_number=request.step_number,
            session_id=request.session_id,
        )
    except InvalidInput as e:
        return 400, {"success": False, "error": str(e)}
    except Exception as e:
        logger.error(f"Enforcement engine failed: {e}", exc_info=True)
        return 500, {"success": False, "error": str(e)}

    return 200, build_response(verdict)

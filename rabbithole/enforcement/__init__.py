"""Research enforcement: ethics kill-switch, speculation purge, verification."""

from rabbithole.enforcement.config import EnforcementConfig
from rabbithole.enforcement.engine import (
    EnforcementEngine,
    EnforcementRequest,
    EnforcementVerdict,
    VerdictState,
    composite_score,
    handle_request,
    round_half_up,
)
from rabbithole.enforcement.ethics import EthicsAssessment, assess_ethics
from rabbithole.enforcement.speculation import SpeculationAnalysis, analyze_speculation
from rabbithole.enforcement.verification import (
    HeuristicVerifier,
    VerificationResult,
    Verifier,
    extract_citations,
    extract_claims,
)

__all__ = [
    "EnforcementConfig",
    "EnforcementEngine",
    "EnforcementRequest",
    "EnforcementVerdict",
    "EthicsAssessment",
    "HeuristicVerifier",
    "SpeculationAnalysis",
    "VerdictState",
    "VerificationResult",
    "Verifier",
    "analyze_speculation",
    "assess_ethics",
    "composite_score",
    "extract_citations",
    "extract_claims",
    "handle_request",
    "round_half_up",
]

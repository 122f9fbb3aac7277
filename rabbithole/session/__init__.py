"""Session ledger, submission pipeline, event-log folds and rule formatting."""

from rabbithole.session.events import (
    HYPOTHESIS_BALLOT,
    MODE_EFFECTIVENESS,
    MODE_TRANSITION,
    Event,
    ModeStats,
    VoteTally,
    fold_mode_effectiveness,
    fold_votes,
)
from rabbithole.session.ledger import SessionLedger
from rabbithole.session.pipeline import SessionPipeline, SubmissionOutcome
from rabbithole.session.rules import (
    ExplorationRule,
    active_rules,
    evaluate_trigger,
    format_rules_text,
)

__all__ = [
    "HYPOTHESIS_BALLOT",
    "MODE_EFFECTIVENESS",
    "MODE_TRANSITION",
    "Event",
    "ExplorationRule",
    "ModeStats",
    "SessionLedger",
    "SessionPipeline",
    "SubmissionOutcome",
    "VoteTally",
    "active_rules",
    "evaluate_trigger",
    "fold_mode_effectiveness",
    "fold_votes",
    "format_rules_text",
]

"""Session event log and the folds that derive running statistics from it.

Vote tallies and mode-effectiveness summaries are never cached: they are
recomputed by folding over the append-only event list whenever needed.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from rabbithole.models import utc_now

logger = logging.getLogger(__name__)

HYPOTHESIS_BALLOT = "hypothesis_ballot"
MODE_TRANSITION = "mode_transition"
MODE_EFFECTIVENESS = "mode_effectiveness"

SUPPORT = "support"
REFUTE = "refute"


class Event(BaseModel):
    """One entry in a session's event log."""

    model_config = {"frozen": True}

    id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    session_id: Optional[str] = None
    step_id: Optional[str] = None
    payload: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utc_now)


@dataclass
class VoteTally:
    """Support/refute counts for one hypothesis."""

    hypothesis_id: str
    support: int = 0
    refute: int = 0
    statement: Optional[str] = None

    @property
    def net(self) -> int:
        return self.support - self.refute

    @property
    def total(self) -> int:
        return self.support + self.refute


def fold_votes(events: Iterable[Event]) -> dict[str, VoteTally]:
    """Tally hypothesis ballots.

    Ballots missing a hypothesis id or carrying a vote other than
    ``support``/``refute`` are skipped.

    Args:
        events: Event log in any order

    Returns:
        Mapping of hypothesis id to tally, in first-seen order.
    """
    tallies: dict[str, VoteTally] = {}
    skipped = 0
    for event in events:
        if event.event_type != HYPOTHESIS_BALLOT:
            continue
        hypothesis_id = event.payload.get("hypothesis_id")
        vote = event.payload.get("vote")
        if not hypothesis_id or vote not in (SUPPORT, REFUTE):
            skipped += 1
            continue

        tally = tallies.setdefault(hypothesis_id, VoteTally(hypothesis_id=hypothesis_id))
        if tally.statement is None and event.payload.get("statement"):
            tally.statement = event.payload["statement"]
        if vote == SUPPORT:
            tally.support += 1
        else:
            tally.refute += 1

    if skipped:
        logger.debug(f"Skipped {skipped} malformed hypothesis ballots")
    return tallies


@dataclass
class ModeStats:
    """Aggregated effectiveness of one exploration mode."""

    mode: str
    transitions: int = 0
    avg_coherence: float = 0.0
    avg_abstraction: float = 0.0
    avg_effectiveness: float = 0.0
    avg_coherence_improvement: float = 0.0
    _coherence: list[float] = field(default_factory=list, repr=False)
    _abstraction: list[float] = field(default_factory=list, repr=False)
    _effectiveness: list[float] = field(default_factory=list, repr=False)
    _improvement: list[float] = field(default_factory=list, repr=False)

    def _finalize(self) -> None:
        self.avg_coherence = _mean(self._coherence)
        self.avg_abstraction = _mean(self._abstraction)
        self.avg_effectiveness = _mean(self._effectiveness)
        self.avg_coherence_improvement = _mean(self._improvement)

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "transitions": self.transitions,
            "avg_coherence": self.avg_coherence,
            "avg_abstraction": self.avg_abstraction,
            "avg_effectiveness": self.avg_effectiveness,
            "avg_coherence_improvement": self.avg_coherence_improvement,
        }


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def fold_mode_effectiveness(events: Iterable[Event]) -> dict[str, ModeStats]:
    """Summarise mode transitions and effectiveness measurements per mode.

    ``mode_transition`` events count transitions and contribute their
    ``coherence_before`` and ``abstraction_level``; ``mode_effectiveness``
    events contribute ``effectiveness_score`` and ``coherence_improvement``.
    Missing or non-numeric fields are ignored rather than counted as zero.
    """
    stats: dict[str, ModeStats] = {}
    for event in events:
        if event.event_type not in (MODE_TRANSITION, MODE_EFFECTIVENESS):
            continue
        mode = event.payload.get("mode")
        if not mode:
            continue
        entry = stats.setdefault(mode, ModeStats(mode=mode))

        if event.event_type == MODE_TRANSITION:
            entry.transitions += 1
            coherence = _number(event.payload.get("coherence_before"))
            if coherence is not None:
                entry._coherence.append(coherence)
                entry._abstraction.append(_number(event.payload.get("abstraction_level")) or 0.0)
        else:
            effectiveness = _number(event.payload.get("effectiveness_score"))
            if effectiveness is not None:
                entry._effectiveness.append(effectiveness)
            improvement = _number(event.payload.get("coherence_improvement"))
            if improvement is not None:
                entry._improvement.append(improvement)

    for entry in stats.values():
        entry._finalize()
    return stats

"""Append-only step ledger for one session."""

import logging
from typing import Iterable, Optional

from rabbithole.errors import SequenceConflict
from rabbithole.models import Session, Step
from rabbithole.session.events import Event

logger = logging.getLogger(__name__)


class SessionLedger:
    """Accepted steps and events of one session, in sequence order.

    Steps are frozen, so ``snapshot()`` can hand out a tuple that analyses
    read without copying and without seeing later appends.
    """

    def __init__(self, session_id: str, steps: Iterable[Step] = ()):
        self.session_id = session_id
        self._steps: list[Step] = []
        self._events: list[Event] = []
        for step in steps:
            self.append(step)

    @classmethod
    def from_session(cls, session: Session) -> "SessionLedger":
        return cls(session.id, session.steps)

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def last_sequence_number(self) -> int:
        return self._steps[-1].sequence_number if self._steps else 0

    def next_sequence_number(self) -> int:
        return self.last_sequence_number + 1

    def append(self, step: Step) -> None:
        """Append an accepted step.

        Raises:
            SequenceConflict: If the step's sequence number does not exceed
                the last one, or its id is already in the ledger.
        """
        if step.sequence_number <= self.last_sequence_number:
            raise SequenceConflict(
                f"Step {step.sequence_number} does not follow "
                f"{self.last_sequence_number} in session {self.session_id}"
            )
        if any(existing.id == step.id for existing in self._steps):
            raise SequenceConflict(f"Step {step.id} already recorded in session {self.session_id}")
        self._steps.append(step)
        logger.debug(f"Session {self.session_id}: appended step {step.sequence_number}")

    def snapshot(self) -> tuple[Step, ...]:
        """Accepted steps in sequence order."""
        return tuple(self._steps)

    def get(self, step_id: str) -> Optional[Step]:
        for step in self._steps:
            if step.id == step_id:
                return step
        return None

    def record_event(self, event_type: str, payload: dict, step_id: Optional[str] = None) -> Event:
        event = Event(
            event_type=event_type,
            session_id=self.session_id,
            step_id=step_id,
            payload=payload,
        )
        self._events.append(event)
        return event

    def events(self) -> tuple[Event, ...]:
        return tuple(self._events)

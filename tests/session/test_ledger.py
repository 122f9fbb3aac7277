"""Tests for the append-only session ledger."""

import pytest

from rabbithole.errors import SequenceConflict
from rabbithole.models import Session, Step
from rabbithole.session import SessionLedger


class TestSessionLedger:
    """Tests for append and snapshot."""

    def test_append_and_snapshot(self, make_step):
        ledger = SessionLedger("s1")
        first = make_step("one")
        second = make_step("two")
        ledger.append(first)
        ledger.append(second)

        assert ledger.snapshot() == (first, second)
        assert len(ledger) == 2
        assert ledger.next_sequence_number() == 3

    def test_empty_ledger(self):
        ledger = SessionLedger("s1")
        assert ledger.snapshot() == ()
        assert ledger.next_sequence_number() == 1

    def test_rejects_non_increasing_sequence(self, make_step):
        ledger = SessionLedger("s1")
        ledger.append(make_step("one", sequence_number=2))

        with pytest.raises(SequenceConflict):
            ledger.append(make_step("two", sequence_number=2))
        with pytest.raises(SequenceConflict):
            ledger.append(make_step("three", sequence_number=1))

    def test_rejects_duplicate_id(self):
        ledger = SessionLedger("s1")
        ledger.append(Step(id="a", sequence_number=1, text="one"))

        with pytest.raises(SequenceConflict):
            ledger.append(Step(id="a", sequence_number=2, text="two"))

    def test_sequence_conflict_is_invalid_input(self, make_step):
        ledger = SessionLedger("s1")
        ledger.append(make_step("one", sequence_number=1))
        with pytest.raises(ValueError):
            ledger.append(make_step("again", sequence_number=1))

    def test_snapshot_is_isolated_from_later_appends(self, make_step):
        ledger = SessionLedger("s1")
        ledger.append(make_step("one"))
        snapshot = ledger.snapshot()
        ledger.append(make_step("two"))

        assert len(snapshot) == 1

    def test_from_session(self, make_step):
        session = Session(id="s9", steps=(make_step("one"), make_step("two")))
        ledger = SessionLedger.from_session(session)

        assert ledger.session_id == "s9"
        assert len(ledger) == 2

    def test_get(self):
        ledger = SessionLedger("s1")
        step = Step(id="a", sequence_number=1, text="one")
        ledger.append(step)

        assert ledger.get("a") is step
        assert ledger.get("missing") is None

    def test_events(self):
        ledger = SessionLedger("s1")
        event = ledger.record_event("mode_transition", {"mode": "single"}, step_id="a")

        assert ledger.events() == (event,)
        assert event.session_id == "s1"
        assert event.step_id == "a"


class TestSessionModel:
    def test_session_rejects_out_of_order_steps(self, make_step):
        with pytest.raises(ValueError, match="strictly increasing"):
            Session(steps=(make_step("a", sequence_number=2), make_step("b", sequence_number=1)))

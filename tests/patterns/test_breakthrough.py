"""Tests for breakthrough indicators and readiness."""

import pytest

from rabbithole.models import JudgeScores
from rabbithole.patterns import (
    analyze_breakthrough_potential,
    breakthrough_readiness,
    extract_concepts,
    should_escalate,
)


class TestAnalyzeBreakthroughPotential:
    """Tests for single-text breakthrough markers."""

    def test_empty_text(self):
        metrics = analyze_breakthrough_potential("")

        assert metrics.overall_score == 0.0
        assert metrics.confidence == 0.0
        assert metrics.is_breakthrough is False
        assert metrics.reasoning == []

    def test_inversion_and_challenge(self):
        metrics = analyze_breakthrough_potential(
            "What if we challenge the conventional paradigm?"
        )

        assert metrics.indicators["temporal_displacement"] == 0.0
        assert metrics.indicators["assumption_inversion"] == pytest.approx(0.65)
        assert metrics.indicators["conceptual_leap"] == pytest.approx(0.08)
        assert metrics.indicators["paradigm_challenge"] == pytest.approx(0.3)
        assert metrics.overall_score == pytest.approx(0.29)
        assert (
            "Challenges fundamental assumptions and inverts conventional thinking"
            in metrics.reasoning
        )

    def test_sensitivity_sets_threshold(self):
        text = "What if we challenge the conventional paradigm?"
        assert analyze_breakthrough_potential(text, "conservative").threshold == 0.7
        assert analyze_breakthrough_potential(text, "sensitive").threshold == 0.3

    def test_unknown_sensitivity(self):
        with pytest.raises(ValueError, match="Unknown sensitivity"):
            analyze_breakthrough_potential("text", "reckless")


class TestBreakthroughReadiness:
    """Tests for session-level readiness."""

    def test_too_few_steps(self, make_step):
        assert breakthrough_readiness([make_step(), make_step()]) == 0.0

    def test_momentum_and_growth(self, make_step):
        steps = [
            make_step(text, judge_scores=JudgeScores(breakthrough_potential=p))
            for text, p in (("a", 5.0), ("ab", 6.0), ("abc", 7.0))
        ]
        # 0.6 * 0.4 momentum + two length increases
        assert breakthrough_readiness(steps) == pytest.approx(0.44)

    def test_shift_vocabulary(self, make_step):
        steps = [
            make_step(text, judge_scores=JudgeScores(breakthrough_potential=p))
            for text, p in (("a", 5.0), ("ab", 6.0), ("a paradigm", 7.0))
        ]
        assert breakthrough_readiness(steps) == pytest.approx(0.64)

    def test_capped_at_one(self, make_step):
        steps = [
            make_step("paradigm " * (i + 1), judge_scores=JudgeScores(breakthrough_potential=10.0))
            for i in range(5)
        ]
        assert breakthrough_readiness(steps) == 1.0

    def test_should_escalate(self):
        assert should_escalate(0.7) is True
        assert should_escalate(0.69) is False


class TestExtractConcepts:
    """Tests for concept extraction."""

    def test_all_patterns(self):
        text = "we use Free Energy principle and the concept of active inference, like NASA and NASA."
        assert extract_concepts(text) == ["Free Energy principle", "concept of active", "NASA"]

    def test_lowercase_cue_phrase_is_not_a_concept(self):
        """The capitalised-phrase pattern requires real capitalisation."""
        assert extract_concepts("the free energy principle") == []

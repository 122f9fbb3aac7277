"""Tests for conceptual saturation tracking."""

import pytest

from rabbithole.models import JudgeScores
from rabbithole.trajectory import track_coherence
from rabbithole.trajectory.coherence_tracking import (
    quality_trend,
    recommend,
    repetition,
    saturation_risk,
)


class TestRepetition:
    def test_repeated_words(self, make_step):
        assert repetition([make_step("a b"), make_step("a b")]) == pytest.approx(50.0)

    def test_single_step(self, make_step):
        assert repetition([make_step("a a a")]) == 0.0


class TestQualityTrend:
    """Tests for the judge-score trend over the last three steps."""

    def test_improving(self, make_step):
        steps = [
            make_step(judge_scores=JudgeScores(depth=v, novelty=v, coherence=v))
            for v in (2.0, 5.0, 8.0)
        ]
        assert quality_trend(steps) == "improving"

    def test_declining(self, make_step):
        steps = [make_step(judge_scores=JudgeScores(depth=v)) for v in (9.0, 6.0, 3.0)]
        assert quality_trend(steps) == "declining"

    def test_unscored_steps_are_stable(self, make_step):
        assert quality_trend([make_step() for _ in range(3)]) == "stable"


class TestSaturationRisk:
    @pytest.mark.parametrize(
        "density,complexity,similarity,expected",
        [
            (0.0, 0, 0.0, "high"),
            (5.0, 5, 90.0, "high"),
            (2.5, 2, 0.0, "medium"),
            (5.0, 5, 70.0, "medium"),
            (5.0, 5, 10.0, "low"),
        ],
    )
    def test_levels(self, density, complexity, similarity, expected):
        assert saturation_risk(density, complexity, similarity) == expected


class TestRecommend:
    def test_high_risk(self):
        assert "paradigm shifts" in recommend("high", "stable", 3)

    def test_declining(self):
        assert "grounding mode" in recommend("low", "declining", 3)

    def test_long_medium_session(self):
        assert "cycling mode" in recommend("medium", "stable", 16)

    def test_nothing_to_recommend(self):
        assert recommend("low", "stable", 3) is None


class TestTrackCoherence:
    """Tests for the combined report."""

    def test_empty_session(self):
        report = track_coherence([])
        assert report.saturation_risk == "low"
        assert report.recommendation is None

    def test_counts_new_concepts(self, make_step):
        text = 'The "mirror" of **gravity**'
        report = track_coherence([make_step(text)])

        assert report.conceptual_complexity == 2
        assert report.metaphor_density == pytest.approx(2 / (len(text) / 1000.0))
        assert report.repetition == 0.0

"""Tests for session trajectory metrics."""

import pytest

from rabbithole.models import JudgeScores
from rabbithole.trajectory import (
    TrajectoryAnalyzer,
    TrajectoryConfig,
    analyze_trajectory,
)
from rabbithole.trajectory.analyzer import (
    DEEP_TERRITORY,
    ESCALATING_INNOVATION,
    INSIGHT_CASCADE,
)


@pytest.fixture
def analyzer():
    return TrajectoryAnalyzer()


def novelty_steps(make_step, values):
    return [make_step(judge_scores=JudgeScores(novelty=v)) for v in values]


class TestTrajectoryConfig:
    def test_invalid_window(self):
        with pytest.raises(ValueError):
            TrajectoryConfig(recent_window=1)


class TestDepthAndCoherence:
    """Tests for judge- and text-derived metrics."""

    def test_depth_mean_with_missing_as_zero(self, analyzer, make_step):
        steps = [make_step(judge_scores=JudgeScores(depth=6.0)), make_step()]
        assert analyzer.depth(steps) == pytest.approx(3.0)

    def test_coherence_word_overlap(self, analyzer, make_step):
        steps = [make_step("a b c"), make_step("a b d")]
        assert analyzer.coherence(steps) == pytest.approx(20.0 / 3.0)

    def test_coherence_single_step(self, analyzer, make_step):
        assert analyzer.coherence([make_step()]) == 0.0


class TestDirection:
    """Tests for the novelty direction classifier."""

    @pytest.mark.parametrize(
        "values,expected",
        [
            ([1.0, 2.0, 3.0], "expanding"),
            ([3.0, 2.0, 1.0], "converging"),
            ([5.0, 5.0, 6.0], "stabilizing"),
            ([1.0, 8.0, 2.0], "oscillating"),
        ],
    )
    def test_direction(self, analyzer, make_step, values, expected):
        assert analyzer.direction(novelty_steps(make_step, values)) == expected

    def test_too_few_steps(self, analyzer, make_step):
        assert analyzer.direction(novelty_steps(make_step, [1.0, 2.0])) == "exploring"


class TestSpatialMetrics:
    """Tests for velocity, gravity and entropy."""

    def test_velocity_from_coordinates(self, make_step):
        steps = [
            make_step(coordinates=(0.0, 0.0, 0.0)),
            make_step(coordinates=(3.0, 4.0, 0.0)),
            make_step(coordinates=(3.0, 4.0, 12.0)),
        ]
        assert analyze_trajectory(steps).velocity == pytest.approx(8.5)

    def test_gravity_and_entropy(self, make_step):
        steps = [
            make_step(coordinates=(0.0, 0.0, 0.0)),
            make_step(coordinates=(6.0, 8.0, 0.0)),
        ]
        metrics = analyze_trajectory(steps)

        # Both points sit 5 units from the centroid
        assert metrics.gravity == pytest.approx(9.5)
        assert metrics.entropy == pytest.approx(0.5)

    def test_embeddings_used_without_coordinates(self, make_step):
        steps = [make_step(embedding=(0.0, 0.0)), make_step(embedding=(3.0, 4.0))]
        assert analyze_trajectory(steps).velocity == pytest.approx(5.0)

    def test_coordinates_take_precedence(self, make_step):
        """Once any step has coordinates, embeddings are ignored."""
        steps = [
            make_step(embedding=(0.0, 0.0, 0.0)),
            make_step(coordinates=(3.0, 4.0, 0.0)),
        ]
        metrics = analyze_trajectory(steps)
        assert metrics.velocity == 0.0
        assert metrics.entropy == 0.0

    def test_no_positions(self, make_step):
        metrics = analyze_trajectory([make_step(), make_step()])
        assert metrics.velocity == 0.0
        assert metrics.gravity == 0.0
        assert metrics.entropy == 0.0


class TestInsightAndPatterns:
    """Tests for insight density and emergent pattern labels."""

    def test_insight_density(self, analyzer, make_step):
        steps = [
            make_step(judge_scores=JudgeScores(breakthrough_potential=8.0)),
            make_step(judge_scores=JudgeScores(breakthrough_potential=7.0)),
            make_step(judge_scores=JudgeScores(breakthrough_potential=2.0)),
            make_step(),
        ]
        assert analyzer.insight_density(steps) == pytest.approx(5.0)

    def test_all_labels(self, analyzer, make_step):
        steps = [
            make_step(judge_scores=JudgeScores(novelty=n, depth=9.0, breakthroughPotential=8.0))
            for n in (1.0, 2.0, 3.0)
        ]
        assert analyzer.emergent_patterns(steps) == [
            ESCALATING_INNOVATION,
            DEEP_TERRITORY,
            INSIGHT_CASCADE,
        ]

    def test_no_labels_for_short_sessions(self, analyzer, make_step):
        assert analyzer.emergent_patterns(novelty_steps(make_step, [1.0, 2.0])) == []


class TestAnalyze:
    """Tests for the combined analysis."""

    def test_empty_session(self):
        metrics = analyze_trajectory([])

        assert metrics.depth == 0.0
        assert metrics.coherence == 0.0
        assert metrics.direction == "exploring"
        assert metrics.emergent_patterns == ()

    def test_deterministic(self, make_step):
        steps = novelty_steps(make_step, [1.0, 4.0, 2.0, 6.0])
        assert analyze_trajectory(steps) == analyze_trajectory(steps)

    def test_to_dict(self, make_step):
        data = analyze_trajectory(novelty_steps(make_step, [1.0, 2.0, 3.0])).to_dict()
        assert data["direction"] == "expanding"
        assert data["emergent_patterns"] == [ESCALATING_INNOVATION]

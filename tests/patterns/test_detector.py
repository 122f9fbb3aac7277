"""Tests for GlobalPatternDetector."""

import pytest

from rabbithole.patterns import (
    GlobalPatternDetector,
    GlobalPatternReport,
    PatternConfig,
    paradigm_shift_intensity,
)

RICH_TEXT = (
    "paradigm breakthrough revolutionary unprecedented novel innovative "
    "transforms reframes reconceptualize emergent synthesis transcends"
)


@pytest.fixture
def cascade_session(make_step, scores):
    """Four unremarkable steps followed by four identical brilliant ones."""
    quiet = [make_step("plain filler text", judge_scores=scores(0.0)) for _ in range(4)]
    brilliant = [make_step(RICH_TEXT, judge_scores=scores(10.0)) for _ in range(4)]
    return quiet + brilliant


class TestPatternConfig:
    def test_invalid_lookahead(self):
        with pytest.raises(ValueError):
            PatternConfig(cascade_lookahead=0)


class TestCascades:
    """Tests for cascade detection."""

    def test_detects_cascade_after_hinge(self, cascade_session):
        cascades = GlobalPatternDetector().detect_cascades(cascade_session)
        by_trigger = {c.trigger_step: c for c in cascades}

        assert 4 in by_trigger
        assert {5, 6} <= set(by_trigger[4].cascade_steps)
        assert by_trigger[4].cascade_steps == [5, 6, 7, 8]
        assert by_trigger[4].depth == 4

    def test_first_brilliant_step_counts_itself_as_context(self, cascade_session):
        """Step 5 follows only filler, so its own text lifts it past 0.7."""
        scores = GlobalPatternDetector().cascade_scores(cascade_session)

        assert scores[4:] == pytest.approx([0.8, 0.9, 1.0, 1.0])

    def test_hinge_points(self, cascade_session):
        report = GlobalPatternDetector().analyze(cascade_session)
        assert report.hinge_points == [2, 3, 4, 5, 6]

    def test_quiet_start_is_not_a_trigger(self, cascade_session):
        triggers = [c.trigger_step for c in GlobalPatternDetector().detect_cascades(cascade_session)]
        assert 1 not in triggers

    def test_momentum_is_mean_brilliance(self, cascade_session):
        cascades = GlobalPatternDetector().detect_cascades(cascade_session)
        last = [c for c in cascades if c.trigger_step == 6][0]

        assert last.cascade_steps == [7, 8]
        assert last.momentum == pytest.approx(1.0)

    def test_short_session_has_no_cascades(self, make_step):
        steps = [make_step(RICH_TEXT) for _ in range(2)]
        assert GlobalPatternDetector().detect_cascades(steps) == []


class TestBreakthroughs:
    """Tests for semantic breakthrough detection."""

    def test_distance_breakthrough(self, make_step):
        steps = [make_step("alpha beta gamma"), make_step("delta epsilon zeta")]
        breakthroughs = GlobalPatternDetector().detect_breakthroughs(steps)

        assert len(breakthroughs) == 1
        assert breakthroughs[0].step_number == 2
        assert breakthroughs[0].conceptual_distance == pytest.approx(1.0)

    def test_close_step_is_not_a_breakthrough(self, make_step):
        steps = [make_step("alpha beta gamma"), make_step("alpha beta gamma delta")]
        assert GlobalPatternDetector().detect_breakthroughs(steps) == []

    def test_novel_concepts_breakthrough(self, make_step):
        """Enough new concepts flag a breakthrough even without a distance jump."""
        steps = [
            make_step("we discuss NASA"),
            make_step("we discuss NASA and ESA and CERN and IBM"),
            make_step("we discuss ESA and NASA and CERN again"),
        ]
        detector = GlobalPatternDetector(PatternConfig(breakthrough_distance=1.0))
        breakthroughs = detector.detect_breakthroughs(steps)

        assert [b.step_number for b in breakthroughs] == [2]
        assert breakthroughs[0].novel_concepts == ["ESA", "CERN", "IBM"]

    def test_paradigm_shift_intensity(self):
        assert paradigm_shift_intensity("a paradigm shift that redefines") == pytest.approx(0.4)


class TestAnalyze:
    """Tests for the combined global scan."""

    def test_empty_session(self):
        report = GlobalPatternDetector().analyze([])
        assert report == GlobalPatternReport()

    def test_report(self, cascade_session):
        report = GlobalPatternDetector().analyze(cascade_session)

        assert report.hinge_points == [c.trigger_step for c in report.cascades]
        assert len(report.crown_jewels) == 1
        assert report.overall_brilliance == pytest.approx(report.crown_jewels[0].score)
        assert 0.0 <= report.breakthrough_readiness <= 1.0

    def test_idempotent(self, cascade_session):
        detector = GlobalPatternDetector()
        assert detector.analyze(cascade_session).to_dict() == detector.analyze(cascade_session).to_dict()

    def test_to_dict_drops_components(self, cascade_session):
        data = GlobalPatternDetector().analyze(cascade_session).to_dict()
        assert "components" not in data["crown_jewels"][0]
        assert data["crown_jewels"][0]["score"] == pytest.approx(1.0)

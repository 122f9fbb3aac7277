"""Tests for BrillianceScorer and its component metrics."""

import pytest

from rabbithole.models import JudgeScores
from rabbithole.scoring import (
    BrillianceConfig,
    BrillianceScorer,
    categorize,
    extract_key_insight,
    transformative_potential,
)
from rabbithole.scoring.metrics import (
    ConceptualNoveltyMetric,
    ContextCoherenceMetric,
    JudgeMetric,
    conceptual_novelty,
)


class TestBrillianceConfig:
    """Tests for configuration validation."""

    def test_default_weights(self):
        config = BrillianceConfig()
        assert config.judge_weight == 0.4
        assert config.novelty_weight == 0.3
        assert config.coherence_weight == 0.3

    def test_weights_must_sum_to_one(self):
        with pytest.raises(ValueError, match="sum to 1.0"):
            BrillianceConfig(judge_weight=0.5)

    def test_invalid_fraction(self):
        with pytest.raises(ValueError):
            BrillianceConfig(crown_jewel_fraction=0.0)


class TestMetrics:
    """Tests for the individual brilliance components."""

    def test_judge_metric_normalises_present_dimensions(self, make_step):
        step = make_step(judge_scores=JudgeScores(novelty=5.0, depth=7.0))
        assert JudgeMetric().compute(step) == pytest.approx(0.6)

    def test_judge_metric_without_scores(self, make_step):
        """Unjudged steps should earn nothing from the judge component."""
        assert JudgeMetric().compute(make_step()) == 0.0

    def test_conceptual_novelty_distinct_hits(self):
        text = "A novel synthesis that is recursive, novel again"
        # novel + synthesis at 0.1, recursive at 0.05
        assert conceptual_novelty(text) == pytest.approx(0.25)

    def test_conceptual_novelty_capped(self):
        text = (
            "paradigm breakthrough revolutionary unprecedented novel innovative "
            "transforms reframes reconceptualize emergent synthesis transcends"
        )
        assert conceptual_novelty(text) == 1.0

    def test_novelty_metric_ignores_history(self, make_step):
        step = make_step("novel ideas")
        metric = ConceptualNoveltyMetric()
        assert metric.compute(step, []) == metric.compute(step, [make_step("novel ideas")])

    def test_coherence_without_context(self, make_step):
        assert ContextCoherenceMetric().compute(make_step(), []) == 0.0

    def test_coherence_with_single_preceding_step(self, make_step):
        """One preceding step is enough context."""
        metric = ContextCoherenceMetric()
        assert metric.compute(make_step("plain text"), [make_step("plain text")]) == pytest.approx(1.0)

    def test_coherence_uses_recent_window(self, make_step):
        """Only the last ``window`` preceding steps should be compared."""
        old = make_step("completely unrelated words")
        recent = [make_step("plain text") for _ in range(2)]
        step = make_step("plain text")

        metric = ContextCoherenceMetric(window=2)
        assert metric.compute(step, [old, *recent]) == pytest.approx(1.0)


class TestBrillianceScorer:
    """Tests for per-step brilliance."""

    def test_judge_only(self, make_step, scores):
        step = make_step("plain text", judge_scores=scores(10.0))
        assert BrillianceScorer().score(step, []) == pytest.approx(0.4)

    def test_judge_and_coherence(self, make_step, scores):
        previous = make_step("plain text")
        step = make_step("plain text", judge_scores=scores(10.0))
        assert BrillianceScorer().score(step, [previous]) == pytest.approx(0.7)

    def test_components_weighted(self, make_step, scores):
        step = make_step("a novel synthesis", judge_scores=scores(5.0))
        components = BrillianceScorer().components(step, [])

        assert components.judge == pytest.approx(0.2)
        assert components.novelty == pytest.approx(0.06)
        assert components.coherence == 0.0
        assert components.total == pytest.approx(0.26)

    def test_score_in_unit_interval(self, make_step, scores):
        text = (
            "paradigm breakthrough revolutionary unprecedented novel innovative "
            "transforms reframes reconceptualize emergent synthesis transcends"
        )
        steps = [make_step(text, judge_scores=scores(10.0)) for _ in range(4)]
        for record in BrillianceScorer().score_session(steps):
            assert 0.0 <= record.score <= 1.0

    def test_record_fields(self, make_step):
        step = make_step("This framework is a fundamental transform of how we think about it.")
        record = BrillianceScorer().record(step, [])

        assert record.step_id == step.id
        assert record.sequence_number == step.sequence_number
        assert record.category == "paradigmatic"
        assert record.transformative_potential == pytest.approx(0.3)
        assert record.components is not None

    def test_score_session_uses_preceding_steps_only(self, make_step, scores):
        """The first step has no context, so its coherence is zero."""
        steps = [make_step("plain text", judge_scores=scores(10.0)) for _ in range(3)]
        records = BrillianceScorer().score_session(steps)

        assert records[0].components.coherence == 0.0
        assert records[1].components.coherence == pytest.approx(0.3)


class TestCrownJewels:
    """Tests for crown-jewel extraction."""

    def test_top_five_percent(self, make_step, scores):
        steps = [
            make_step(f"step number {i}", judge_scores=scores(float(i % 11)))
            for i in range(100)
        ]
        jewels = BrillianceScorer().crown_jewels(steps)

        assert len(jewels) == 5
        assert [j.score for j in jewels] == sorted((j.score for j in jewels), reverse=True)

    def test_minimum_one(self, make_step):
        steps = [make_step("plain text") for _ in range(10)]
        assert len(BrillianceScorer().crown_jewels(steps)) == 1

    def test_empty_session(self):
        assert BrillianceScorer().crown_jewels([]) == []

    def test_best_step_first(self, make_step, scores):
        steps = [
            make_step("alpha", judge_scores=scores(1.0)),
            make_step("beta", judge_scores=scores(9.0)),
            make_step("gamma", judge_scores=scores(4.0)),
        ]
        jewels = BrillianceScorer().crown_jewels(steps)
        assert jewels[0].step_id == steps[1].id


class TestTextHelpers:
    """Tests for categorisation, transformative potential and insight extraction."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("a new framework for solutions", "paradigmatic"),
            ("an elegant implementation", "practical"),
            ("a sense of harmony", "aesthetic"),
            ("nothing in particular", "generative"),
        ],
    )
    def test_categorize(self, text, expected):
        assert categorize(text) == expected

    def test_transformative_potential(self):
        assert transformative_potential("a fundamental transform") == pytest.approx(0.3)
        assert transformative_potential("quiet text") == 0.0

    def test_insight_prefers_cue_sentence(self):
        text = (
            "Short one. This sentence is long enough to count. "
            "Therefore the answer follows from it."
        )
        assert extract_key_insight(text) == "Therefore the answer follows from it"

    def test_insight_first_long_sentence(self):
        text = "Tiny. The first sufficiently long sentence here. Another long sentence follows."
        assert extract_key_insight(text) == "The first sufficiently long sentence here"

    def test_insight_truncated_fallback(self):
        text = "Short bit. " * 30
        assert extract_key_insight(text) == text[:200] + "..."

    def test_insight_short_text_returned_whole(self):
        assert extract_key_insight("Tiny.") == "Tiny."

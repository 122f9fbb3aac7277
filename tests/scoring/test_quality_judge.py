"""Tests for the heuristic quality judge."""

import pytest

from rabbithole.scoring import HeuristicQualityJudge, QualityJudgeConfig
from rabbithole.scoring.quality_judge import extract_keywords


@pytest.fixture
def judge():
    return HeuristicQualityJudge()


class TestQualityJudgeConfig:
    """Tests for weight normalisation."""

    def test_default_weights_sum_to_one(self):
        assert sum(QualityJudgeConfig().weights.values()) == pytest.approx(1.0)

    def test_partial_weights_merged_and_normalised(self):
        config = QualityJudgeConfig(weights={"novelty": 2.0})
        assert config.weights["novelty"] == pytest.approx(2.0 / 2.8)
        assert sum(config.weights.values()) == pytest.approx(1.0)

    def test_unknown_dimension_rejected(self):
        with pytest.raises(ValueError, match="Unknown quality dimensions"):
            QualityJudgeConfig(weights={"charisma": 1.0})


class TestDimensions:
    """Tests for individual dimension heuristics."""

    def test_novelty_weighted_patterns(self, judge):
        assert judge.assess_novelty("paradigm breakthrough") == pytest.approx(0.345)

    def test_coherence_needs_sentences(self, judge):
        assert judge.assess_coherence("short") == 0.0

    def test_coherence_rewards_structure(self, judge):
        text = (
            "The river carries sediment downstream. "
            "However, the delta grows slowly. "
            "Therefore the coastline moves outward over time."
        )
        # base 0.6, conclusion 0.15, one transition 0.05, one flow word 0.03
        assert judge.assess_coherence(text) == pytest.approx(0.83)

    def test_depth_penalises_superficial_words(self, judge):
        assert judge.assess_depth("simply just basic") == pytest.approx(0.05)

    def test_relevance_without_question(self, judge):
        assert judge.assess_relevance("anything", "") == 0.5

    def test_relevance_keyword_overlap(self, judge):
        score = judge.assess_relevance("What consciousness is remains open", "What is consciousness?")
        assert score == pytest.approx(1.0)


class TestJudge:
    """Tests for the full judgment."""

    def test_empty_response(self, judge):
        judgment = judge.judge("")

        assert judgment.dimensions == pytest.approx({
            "novelty": 0.3,
            "coherence": 0.0,
            "depth": 0.2,
            "relevance": 0.5,
            "creativity": 0.2,
            "logic": 0.3,
            "insight": 0.25,
        })
        assert judgment.overall_score == pytest.approx(0.24)
        assert judgment.is_high_quality is False
        assert "Response quality below standards - consider revision" in judgment.feedback
        assert "Incoherent reasoning - may confuse readers" in judgment.risk_factors

    def test_to_judge_scores(self, judge):
        scores = judge.judge("").to_judge_scores()

        assert scores.novelty == pytest.approx(3.0)
        assert scores.relevance == pytest.approx(5.0)
        assert scores.breakthrough_potential is None

    def test_scores_within_bounds(self, judge):
        text = (
            "Imagine consciousness as a river. Because the river remembers its banks, "
            "the underlying insight is profound: meaning emerges from constraint. "
            "Therefore the paradigm shifts."
        )
        judgment = judge.judge(text, "What is consciousness?")
        for value in judgment.dimensions.values():
            assert 0.0 <= value <= 1.0
        assert 0.0 <= judgment.confidence <= 1.0


def test_extract_keywords_drops_short_and_stop_words():
    assert extract_keywords("This is the meaning of life, with purpose!") == [
        "meaning", "life", "purpose",
    ]

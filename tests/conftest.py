"""Pytest configuration and fixtures."""

import pytest

from rabbithole.models import JudgeScores, Step


def all_scores(value: float) -> JudgeScores:
    """JudgeScores with every dimension set to ``value``."""
    return JudgeScores(
        novelty=value,
        depth=value,
        coherence=value,
        relevance=value,
        creativity=value,
        logic=value,
        insight=value,
        breakthrough_potential=value,
    )


@pytest.fixture
def make_step():
    """Factory for steps with sequential numbering by default."""
    counter = {"n": 0}

    def _make(text: str = "plain text", sequence_number=None, **kwargs) -> Step:
        counter["n"] += 1
        number = sequence_number if sequence_number is not None else counter["n"]
        return Step(sequence_number=number, text=text, **kwargs)

    return _make


@pytest.fixture
def scores():
    """Factory for uniform JudgeScores."""
    return all_scores


# 41 words, seven evidence phrases, three parenthesised citations, no hedging
GROUNDED_PASSAGE = (
    "According to published data from 2019 (Smith 2020), the measured error rate "
    "fell by 12% across 400 sites. A peer-reviewed study (Jones 2018) observed the "
    "same 12% drop in 2021. Independent research (Lee 2022) verified these figures "
    "with documented field measurements."
)

# Five ethics keywords (consent, surveillance, manipulation, discrimination,
# deception: 0.5) plus the "without consent" risk pattern (0.3), risk 0.8
UNETHICAL_PASSAGE = (
    "Data collected without consent enables surveillance, manipulation, "
    "discrimination and deception."
)


@pytest.fixture
def grounded():
    """Evidence-rich candidate that passes enforcement."""
    return GROUNDED_PASSAGE


@pytest.fixture
def unethical():
    """Candidate whose ethics risk exceeds the kill threshold."""
    return UNETHICAL_PASSAGE


@pytest.fixture
def speculative():
    """Candidate that is 50% speculation words."""
    return "This might possibly work."


@pytest.fixture
def ungrounded():
    """Neutral candidate with no evidence or citations."""
    return "The river flows north through the valley and the town."

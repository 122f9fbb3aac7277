"""Lightweight claim and citation verification.

No web lookups happen here: claims are "verifiable" when they carry a
number, a date reference or a proper-noun pair, and citations count as
well formed when they are parenthesised. Callers who have a real fact
checker plug it in through the ``Verifier`` protocol.
"""

import re
from typing import Protocol

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

BASE_SCORE = 5.0
MAX_SCORE = 10.0

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_CLAIM_CUE_RE = re.compile(r"research|study|data")
_PERCENT_RE = re.compile(r"\d+%")

_NUMBER_RE = re.compile(r"\d+")
_DATE_RE = re.compile(r"(19|20)\d{2}|century|decade|year", re.IGNORECASE)
_PROPER_NOUN_PAIR_RE = re.compile(r"[A-Z][a-z]+ [A-Z][a-z]+")

CITATION_PATTERNS = (
    re.compile(r"\([^)]*\d{4}[^)]*\)"),  # (Author 2024)
    re.compile(r"\[[^\]]*\]"),  # [1]
    re.compile(r"\"[^\"]*\"[^.]*\d{4}"),  # "Title" Author 2024
)


class VerificationResult(BaseModel):
    """Outcome of verifying one candidate text."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "frozen": True}

    factual_accuracy: float = Field(ge=0.0, le=10.0)
    citations_found: int = Field(ge=0)
    verification_score: float = Field(ge=0.0, le=10.0)
    validated_claims: list[str] = Field(default_factory=list)
    invalidated_claims: list[str] = Field(default_factory=list)


class Verifier(Protocol):
    """Anything that can verify a candidate text.

    Implementations raise ``ProviderError`` when they cannot reach their
    backing service; the engine then rejects the step as insufficient data.
    """

    def verify(self, text: str) -> VerificationResult:
        ...


def extract_claims(text: str) -> list[str]:
    """Sentences longer than 20 characters that mention research/study/data or a percentage."""
    return [
        sentence
        for sentence in _SENTENCE_SPLIT_RE.split(text)
        if len(sentence) > 20 and (_CLAIM_CUE_RE.search(sentence) or _PERCENT_RE.search(sentence))
    ]


def extract_citations(text: str) -> list[str]:
    """Citation-like substrings, grouped by pattern in pattern order."""
    citations = []
    for pattern in CITATION_PATTERNS:
        citations.extend(match.group(0) for match in pattern.finditer(text))
    return citations


def is_verifiable(claim: str) -> bool:
    return bool(
        _NUMBER_RE.search(claim) or _DATE_RE.search(claim) or _PROPER_NOUN_PAIR_RE.search(claim)
    )


def is_well_formed(citation: str) -> bool:
    return "(" in citation and ")" in citation


class HeuristicVerifier:
    """Default verifier: pattern checks only, never fails."""

    def verify(self, text: str) -> VerificationResult:
        claims = extract_claims(text)
        citations = extract_citations(text)

        validated = [claim for claim in claims if is_verifiable(claim)]
        invalidated = [claim for claim in claims if not is_verifiable(claim)]
        well_formed = sum(1 for citation in citations if is_well_formed(citation))

        return VerificationResult(
            factual_accuracy=min(BASE_SCORE + len(validated), MAX_SCORE),
            citations_found=len(citations),
            verification_score=min(BASE_SCORE + well_formed, MAX_SCORE),
            validated_claims=validated,
            invalidated_claims=invalidated,
        )

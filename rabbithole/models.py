"""Pydantic schemas for steps, judge scores and sessions.

A Step is immutable once accepted: sessions only ever grow by appending new
steps, and derived records (brilliance, trajectory, cascades) are recomputed
from the step list rather than patched.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

import numpy as np
from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

# Judge dimensions in canonical order
JUDGE_DIMENSIONS: tuple[str, ...] = (
    "novelty",
    "depth",
    "coherence",
    "relevance",
    "creativity",
    "logic",
    "insight",
    "breakthrough_potential",
)

DEFAULT_JUDGE_SCALE = 10.0


def utc_now() -> datetime:
    """Return current UTC datetime."""
    return datetime.now(timezone.utc)


class JudgeScores(BaseModel):
    """Multi-dimensional judge scores attached to a step.

    Every dimension is optional; an external judge may only score a subset.
    Scores share one scale per session (0-10 by default).
    """

    model_config = {"frozen": True, "populate_by_name": True}

    novelty: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    depth: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    coherence: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    relevance: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    creativity: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    logic: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    insight: Optional[float] = Field(default=None, ge=0.0, le=10.0)
    breakthrough_potential: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=10.0,
        validation_alias=AliasChoices("breakthrough_potential", "breakthroughPotential"),
    )

    def present(self) -> dict[str, float]:
        """Return the dimensions that carry a score, in canonical order."""
        values = {}
        for name in JUDGE_DIMENSIONS:
            value = getattr(self, name)
            if value is not None:
                values[name] = float(value)
        return values

    def get(self, name: str, default: float = 0.0) -> float:
        """Return one dimension, or ``default`` when it is absent."""
        value = getattr(self, name, None)
        return default if value is None else float(value)

    def normalized_mean(self, scale: float = DEFAULT_JUDGE_SCALE) -> Optional[float]:
        """Mean of present dimensions mapped into [0, 1].

        Returns:
            Mean score divided by ``scale`` and clamped, or None when no
            dimension is present.
        """
        values = self.present()
        if not values:
            return None
        mean = sum(values.values()) / len(values)
        return max(0.0, min(1.0, mean / scale))


class Step(BaseModel):
    """One generated text artifact in a session.

    Attributes:
        id: Opaque identifier
        sequence_number: 1-based position, strictly increasing per session
        text: Generated text
        judge_scores: Optional external judge scores
        embedding: Optional embedding vector from the provider
        coordinates: Optional 3D layout position from the visualisation layer
        created_at: When the step was generated
    """

    model_config = {"frozen": True}

    id: str = Field(default_factory=lambda: str(uuid4()))
    sequence_number: int = Field(ge=1)
    text: str
    judge_scores: Optional[JudgeScores] = None
    embedding: Optional[tuple[float, ...]] = None
    coordinates: Optional[tuple[float, float, float]] = None
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("embedding")
    @classmethod
    def _embedding_not_empty(cls, v: Optional[tuple[float, ...]]) -> Optional[tuple[float, ...]]:
        if v is not None and len(v) == 0:
            raise ValueError("embedding must not be empty")
        return v

    @property
    def vector(self) -> Optional[np.ndarray]:
        """Embedding as a float array, or None."""
        if self.embedding is None:
            return None
        return np.asarray(self.embedding, dtype=np.float64)

    @property
    def coordinate_vector(self) -> Optional[np.ndarray]:
        """Layout coordinates as a float array, or None."""
        if self.coordinates is None:
            return None
        return np.asarray(self.coordinates, dtype=np.float64)

    def judge(self, name: str, default: float = 0.0) -> float:
        """Shortcut for a judge dimension with a default for missing scores."""
        if self.judge_scores is None:
            return default
        return self.judge_scores.get(name, default)

    def with_embedding(self, embedding: np.ndarray | list[float]) -> "Step":
        """Return a copy of this step carrying ``embedding``."""
        return self.model_copy(update={"embedding": tuple(float(x) for x in embedding)})

    def with_judge_scores(self, judge_scores: JudgeScores) -> "Step":
        """Return a copy of this step carrying ``judge_scores``."""
        return self.model_copy(update={"judge_scores": judge_scores})


class Session(BaseModel):
    """An exploration ("rabbit hole") owned by one initiating question.

    Configuration (mode, rules) is consumed by the pipeline, never produced.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    question: str = ""
    mode: str = "exploration"
    rules: list[str] = Field(default_factory=list)
    steps: tuple[Step, ...] = ()

    @model_validator(mode="after")
    def _check_sequence(self) -> "Session":
        previous = 0
        for step in self.steps:
            if step.sequence_number <= previous:
                raise ValueError(
                    f"sequence_number must be strictly increasing, "
                    f"got {step.sequence_number} after {previous}"
                )
            previous = step.sequence_number
        return self

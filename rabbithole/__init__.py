"""rabbithole: scoring core for multi-step exploration sessions.

Novelty and similarity between steps, session trajectory metrics,
brilliance / cascade / breakthrough detection, and the research
enforcement gate that decides whether a candidate step is accepted.
"""

from rabbithole.errors import (
    DimensionMismatch,
    InvalidInput,
    ProviderError,
    RabbitHoleError,
    SequenceConflict,
)
from rabbithole.models import JudgeScores, Session, Step

__version__ = "0.1.0"

__all__ = [
    "DimensionMismatch",
    "InvalidInput",
    "JudgeScores",
    "ProviderError",
    "RabbitHoleError",
    "SequenceConflict",
    "Session",
    "Step",
]

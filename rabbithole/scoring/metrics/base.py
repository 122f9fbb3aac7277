"""Base class for brilliance component metrics."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from rabbithole.models import Step


class BaseMetric(ABC):
    """Abstract base class for brilliance component metrics.

    Each metric computes an unweighted score in [0, 1] range for a step.
    Weights are applied by the scorer, not the metric.
    """

    @abstractmethod
    def compute(self, step: "Step", preceding: Sequence["Step"]) -> float:
        """Compute the metric score for a step.

        Args:
            step: The step to score
            preceding: Steps that came before it in the session, oldest first

        Returns:
            Score in [0, 1] range where higher is better
        """
        pass

    @staticmethod
    def clamp(value: float, min_val: float = 0.0, max_val: float = 1.0) -> float:
        """Clamp a value to the specified range."""
        return max(min_val, min(max_val, value))

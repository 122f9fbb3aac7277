"""Error categories raised by the scoring pipeline.

Input errors fail fast with a named category. Policy outcomes (kill, purge)
are verdicts, not exceptions, and never appear here.
"""


class RabbitHoleError(Exception):
    """Base class for all pipeline errors."""


class DimensionMismatch(RabbitHoleError, ValueError):
    """Two vectors that must share a length do not."""

    def __init__(self, left: int, right: int):
        self.left = left
        self.right = right
        super().__init__(f"Vectors must have the same length, got {left} and {right}")


class InvalidInput(RabbitHoleError, ValueError):
    """Input is malformed or empty where content is required."""


class SequenceConflict(InvalidInput):
    """A step would break the unique, strictly increasing sequence numbering."""


class ProviderError(RabbitHoleError):
    """An external provider (embedding model, verifier) could not serve a request."""

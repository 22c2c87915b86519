class BarrelsException(Exception):
    """Base class for errors raised by the swing-scoring engine."""


class InvalidInputError(BarrelsException, ValueError):
    """Raised when a caller hands the engine data that violates its contract."""

"""
Error taxonomy for the game engine.
All engine errors are raised before any board or roster mutation.
"""


class EngineError(Exception):
    """Base class for errors raised by the game engine."""
    pass


class PhaseViolation(EngineError):
    """Raised when an operation is attempted in a phase that does not allow it."""

    def __init__(self, operation: str, phase, allowed=None):
        self.operation = operation
        self.phase = phase
        self.allowed = list(allowed or [])
        message = f"Operation '{operation}' is not allowed in phase '{phase.name}'"
        if self.allowed:
            message += f". Allowed operations: {', '.join(self.allowed)}"
        super().__init__(message)


class InvalidSelection(EngineError):
    """Raised for out-of-bounds or lake coordinates and for moves that are not legal."""
    pass


class InconsistentOutcome(EngineError):
    """Raised when an externally supplied outcome contradicts combat semantics."""
    pass

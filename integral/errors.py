from typing import Optional


class CompileError(ValueError):
    """Structural failure while compiling an RPN expression."""

    def __init__(self, message: str, token: Optional[str] = None, position: Optional[int] = None):
        super().__init__(message)
        self.token = token
        self.position = position


class InvalidToken(CompileError):
    pass


class StackUnderflow(CompileError):
    pass


class StackOverflow(CompileError):
    pass


class TrailingOperands(CompileError):
    pass


class ValidationError(ValueError):
    """Rejected caller input (integrand, interval, refinement, settings)."""


class TreeInvariantError(RuntimeError):
    """A tree reached the numeric engine in a state compilation never produces."""

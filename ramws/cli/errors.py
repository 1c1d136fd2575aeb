"""Typed exception hierarchy for CLI-related errors."""

from ramws.errors import RamwsError


class CLIError(RamwsError):
    """Base exception for all CLI-related errors."""
    pass


class InitError(CLIError):
    """Raised when initialization fails."""

    def __init__(self, message: str):
        super().__init__(message)

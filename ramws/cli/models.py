"""Data models for CLI operations."""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for ramws commands.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): Config, filesystem or other general failure
    - SYNC_ERROR (2): A mirror (rsync) call failed
    - PATH_ESCAPE (3): A mapping resolved outside its root; nothing was mirrored

    Example:
        >>> raise typer.Exit(ExitCode.SUCCESS)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    SYNC_ERROR = 2
    PATH_ESCAPE = 3

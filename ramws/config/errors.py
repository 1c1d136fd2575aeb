"""Typed exception hierarchy for configuration and path errors.

These errors cover everything that can go wrong before a mirror runs:
unreadable or invalid settings, missing config files, filesystem failures
while creating or removing directories, and mapping paths that resolve
outside of the root they belong to.
"""

from typing import Optional

from ramws.errors import RamwsError


class ConfigError(RamwsError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class ConfigNotFoundError(ConfigError):
    """Raised when no .ramws.yml can be located."""

    def __init__(self, search_root: str):
        super().__init__(f".ramws.yml not found above {search_root}; run 'ramws init'")
        self.search_root = search_root


class FilesystemError(RamwsError):
    """Raised when filesystem operations fail (create, remove, stat, read)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class PathEscapeError(RamwsError):
    """Raised when a mapping path resolves outside its expected root."""

    def __init__(self, path: str, root: str):
        super().__init__(f"path {path} escapes root {root}")
        self.path = path
        self.root = root

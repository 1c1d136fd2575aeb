"""Command-line interface for ramws.

This package provides the `ramws` CLI tool that creates RAM workspaces,
opens shells inside them, and syncs changes between the workspace and the
project on disk.
"""

from .errors import CLIError, InitError
from .init_command import InitCommand
from .models import ExitCode
from .workspace_command import WorkspaceCommand, load_resolved_config

__all__ = [
    'CLIError',
    'InitError',
    'InitCommand',
    'ExitCode',
    'WorkspaceCommand',
    'load_resolved_config',
]

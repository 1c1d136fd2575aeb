"""Configuration for ramws workspaces.

This package loads .ramws.yml files, locates the project root, and derives
the deterministic workspace location for a project.
"""

from .config_loader import ConfigLoader
from .errors import ConfigError, ConfigNotFoundError, FilesystemError, PathEscapeError
from .models import (
    BuildDirSpec,
    BuildDirType,
    GitPolicy,
    RamwsConfig,
    ResolvedConfig,
    SourceSpec,
    SyncOnExit,
    SyncPolicy,
)
from .paths import (
    CONFIG_FILE_NAME,
    STAGING_DIR_NAME,
    discover_config,
    ensure_dir,
    ensure_within_root,
    expand_placeholders,
    find_project_root,
    staging_dir,
    project_slug,
)

__all__ = [
    'ConfigLoader',
    'ConfigError',
    'ConfigNotFoundError',
    'FilesystemError',
    'PathEscapeError',
    'BuildDirSpec',
    'BuildDirType',
    'GitPolicy',
    'RamwsConfig',
    'ResolvedConfig',
    'SourceSpec',
    'SyncOnExit',
    'SyncPolicy',
    'CONFIG_FILE_NAME',
    'STAGING_DIR_NAME',
    'discover_config',
    'ensure_dir',
    'ensure_within_root',
    'expand_placeholders',
    'find_project_root',
    'project_slug',
    'staging_dir',
]

"""RAM workspace lifecycle and status reporting.

This package creates, populates and destroys the ephemeral workspace and
reports on its backing filesystem and pending changes.
"""

from .errors import CapacityQueryFailed
from .fs_status import TMPFS_MAGIC, FsStatus, format_bytes, fs_status, is_tmpfs
from .lifecycle import Workspace
from .status import StatusReporter, StatusSnapshot

__all__ = [
    'CapacityQueryFailed',
    'TMPFS_MAGIC',
    'FsStatus',
    'format_bytes',
    'fs_status',
    'is_tmpfs',
    'Workspace',
    'StatusReporter',
    'StatusSnapshot',
]

"""Mirroring, diffing and sync orchestration between project and workspace.

This package provides the tree-mirroring primitive (rsync-backed or
in-process), drift measurement on top of its dry-run itemization, and the
refresh/syncback workflows that move content in each direction.
"""

from .diff_engine import DiffEngine, classify_line, summarize
from .errors import MirrorFailed
from .filters import FilterRules
from .models import (
    DiffSummary,
    ItemizedChanges,
    SyncDirection,
    SyncOptions,
    SyncRole,
    sum_summaries,
)
from .orchestrator import SyncOrchestrator, prompt_confirm
from .path_syncer import (
    LocalPathSyncer,
    PathSyncer,
    RsyncPathSyncer,
    build_rsync_command,
    path_with_trailing_slash,
)

__all__ = [
    'DiffEngine',
    'classify_line',
    'summarize',
    'MirrorFailed',
    'FilterRules',
    'DiffSummary',
    'ItemizedChanges',
    'SyncDirection',
    'SyncOptions',
    'SyncRole',
    'sum_summaries',
    'SyncOrchestrator',
    'prompt_confirm',
    'LocalPathSyncer',
    'PathSyncer',
    'RsyncPathSyncer',
    'build_rsync_command',
    'path_with_trailing_slash',
]

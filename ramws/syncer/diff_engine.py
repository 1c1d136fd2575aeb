"""Drift measurement between a workspace subtree and its origin.

DiffEngine runs a dry-run, itemizing mirror in the workspace -> origin
direction and counts the itemization lines. Neither tree is modified.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, Optional

from .models import DiffSummary, SyncDirection, SyncOptions
from .path_syncer import PathSyncer, RsyncPathSyncer

logger = logging.getLogger(__name__)

ADDED_PREFIX = ">f+++++++++"
CHANGED_PREFIXES = (">f", ".f", "cD")
DELETED_PREFIX = "*deleting"


def classify_line(line: str) -> Optional[str]:
    """Classify one itemization line as 'added', 'changed', 'deleted' or None.

    The brand-new file prefix is checked before the generic file-transfer
    prefixes it shares its first two characters with.
    """
    if line.startswith(ADDED_PREFIX):
        return "added"
    if line.startswith(CHANGED_PREFIXES):
        return "changed"
    if line.startswith(DELETED_PREFIX):
        return "deleted"
    return None


def summarize(lines: Iterable[str]) -> DiffSummary:
    """Count itemization lines per category, ignoring unrecognized ones."""
    summary = DiffSummary()
    for line in lines:
        kind = classify_line(line)
        if kind == "added":
            summary.added += 1
        elif kind == "changed":
            summary.changed += 1
        elif kind == "deleted":
            summary.deleted += 1
    return summary


class DiffEngine:
    """Counts pending workspace -> origin changes.

    Example:
        >>> engine = DiffEngine(RsyncPathSyncer())
        >>> summary = engine.diff(ws / "src", orig / "src", SyncOptions(delete=True))
        >>> summary.added, summary.changed, summary.deleted
        (1, 0, 0)
    """

    def __init__(self, syncer: Optional[PathSyncer] = None, logger: Optional[logging.Logger] = None):
        self.syncer = syncer or RsyncPathSyncer()
        self.logger = logger or logging.getLogger(__name__)

    def diff(self, workspace_path: Path, orig_path: Path, options: SyncOptions) -> DiffSummary:
        """Compare workspace_path against orig_path.

        The delete flag and filters are taken from options; dry_run and
        itemize are always forced on.

        Raises:
            MirrorFailed: If the underlying dry-run mirror fails
        """
        preview = replace(options, dry_run=True, itemize=True)
        changes = self.syncer.mirror(
            Path(workspace_path),
            Path(orig_path),
            SyncDirection.WORKSPACE_TO_ORIG,
            preview,
        )
        summary = summarize(changes)
        self.logger.debug(
            f"Diff {workspace_path} -> {orig_path}: added={summary.added} "
            f"changed={summary.changed} deleted={summary.deleted}"
        )
        return summary

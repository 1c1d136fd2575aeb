"""Read-only status snapshot of a workspace.

StatusReporter gathers capacity figures for the backing filesystem, the
aggregate pending diff over all source mappings, and the sync policy. It is
best-effort: failures degrade individual fields instead of failing the
whole report.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from ramws.config.models import ResolvedConfig, SyncOnExit
from ramws.syncer.diff_engine import DiffEngine
from ramws.syncer.errors import MirrorFailed
from ramws.syncer.mappings import mapping_paths, mirror_options
from ramws.syncer.models import DiffSummary
from ramws.syncer.path_syncer import PathSyncer, RsyncPathSyncer

from .errors import CapacityQueryFailed
from .fs_status import format_bytes, fs_status

logger = logging.getLogger(__name__)


@dataclass
class StatusSnapshot:
    """Point-in-time view of a workspace; never persisted.

    Capacity fields are None when the workspace is absent or the
    filesystem query failed.
    """
    exists: bool
    workspace_root: Path
    config_path: Path
    sync_policy: SyncOnExit
    fs_type: Optional[str] = None
    total: Optional[int] = None
    available: Optional[int] = None
    used: Optional[int] = None
    diff: DiffSummary = field(default_factory=DiffSummary)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form used by `ramws --json status`."""
        return {
            'workspace_exists': self.exists,
            'workspace_root': str(self.workspace_root),
            'fs_type': self.fs_type,
            'total': _maybe_bytes(self.total),
            'available': _maybe_bytes(self.available),
            'used': _maybe_bytes(self.used),
            'diff_changed': self.diff.changed,
            'diff_added': self.diff.added,
            'diff_deleted': self.diff.deleted,
            'sync_policy': self.sync_policy.value,
            'config_path': str(self.config_path),
        }


def _maybe_bytes(value: Optional[int]) -> Optional[str]:
    return format_bytes(value) if value is not None else None


class StatusReporter:
    """Builds StatusSnapshot objects for a resolved configuration."""

    def __init__(
        self,
        config: ResolvedConfig,
        syncer: Optional[PathSyncer] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.diff_engine = DiffEngine(syncer or RsyncPathSyncer(), logger=self.logger)

    def snapshot(self) -> StatusSnapshot:
        snapshot = StatusSnapshot(
            exists=self.config.workspace_root.exists(),
            workspace_root=self.config.workspace_root,
            config_path=self.config.config_path,
            sync_policy=self.config.raw.sync.on_exit,
        )
        if not snapshot.exists:
            return snapshot

        try:
            status = fs_status(self.config.workspace_root)
        except CapacityQueryFailed as e:
            self.logger.debug(f"Capacity unavailable: {e}")
        else:
            snapshot.fs_type = status.fs_type
            snapshot.total = status.total
            snapshot.available = status.available
            snapshot.used = status.used

        for source in self.config.raw.sources:
            rel = Path(source.path)
            orig_path, workspace_path = mapping_paths(self.config, rel)
            try:
                snapshot.diff += self.diff_engine.diff(
                    workspace_path,
                    orig_path,
                    mirror_options(self.config, rel),
                )
            except MirrorFailed as e:
                self.logger.warning(f"Skipping diff for {rel}: {e}")

        return snapshot

"""Refresh and syncback orchestration.

This module provides SyncOrchestrator, which moves content between the
project on disk and the RAM workspace:

- refresh pulls origin state into the workspace (origin -> workspace);
- syncback pushes workspace state to the origin through a staging tree
  under the project root (workspace -> staging -> origin).

It also owns the confirmation gate for destructive actions and the
shell-exit sync policy.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import typer

from ramws.config.errors import FilesystemError
from ramws.config.models import BuildDirType, ResolvedConfig, SyncOnExit
from ramws.config.paths import staging_dir

from .diff_engine import DiffEngine
from .mappings import mapping_paths, mirror_options
from .models import DiffSummary, SyncDirection, SyncRole, sum_summaries
from .path_syncer import PathSyncer, RsyncPathSyncer

logger = logging.getLogger(__name__)

# (message, default) -> answer
Confirmer = Callable[[str, bool], bool]


def prompt_confirm(message: str, default: bool = True) -> bool:
    """Ask a yes/no question on the terminal."""
    return typer.confirm(message, default=default)


class SyncOrchestrator:
    """Coordinates multi-path syncs between the project and its workspace.

    Paths are processed strictly in the order given. A failing mirror aborts
    the rest of the call; paths already synced in the same call stay synced.

    Example:
        >>> orchestrator = SyncOrchestrator(resolved_config)
        >>> orchestrator.refresh([Path("src")])
        >>> orchestrator.syncback([Path("src")], noninteractive=True)
    """

    def __init__(
        self,
        config: ResolvedConfig,
        syncer: Optional[PathSyncer] = None,
        confirmer: Optional[Confirmer] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.syncer = syncer or RsyncPathSyncer()
        self.confirmer = confirmer or prompt_confirm
        self.logger = logger or logging.getLogger(__name__)
        self.diff_engine = DiffEngine(self.syncer, logger=self.logger)

    @property
    def staging_root(self) -> Path:
        return staging_dir(self.config.orig_root)

    def source_paths(self) -> List[Path]:
        return [Path(source.path) for source in self.config.raw.sources]

    def refresh(self, paths: Sequence[Path]) -> None:
        """Overwrite workspace paths with their origin state.

        Raises:
            PathEscapeError: If a path resolves outside its root (checked for
                every path before anything is mirrored)
            MirrorFailed: If a mirror fails (remaining paths are skipped)
        """
        pairs = [(Path(rel), *mapping_paths(self.config, rel)) for rel in paths]
        for rel, orig_path, workspace_path in pairs:
            self.logger.debug(f"Refreshing {rel} from {orig_path}")
            self.syncer.mirror(
                orig_path,
                workspace_path,
                SyncDirection.ORIG_TO_WORKSPACE,
                mirror_options(self.config, rel),
            )
        self.logger.info(f"Refreshed {len(paths)} path(s) from disk")

    def syncback(self, paths: Sequence[Path], noninteractive: bool = False) -> None:
        """Push workspace paths back to the origin via the staging tree.

        Phase 1 recreates the staging directory, phase 2 copies every path
        from the workspace into staging, phase 3 mirrors staging onto the
        origin, phase 4 removes staging. Until phase 3 starts the origin is
        untouched. Phase 3 itself is a plain mirror, so an interruption there
        can leave the origin partially updated. On failure the staging tree
        is left in place.

        Raises:
            PathEscapeError: If a path resolves outside its root (checked for
                every path before anything is copied)
            MirrorFailed: If a mirror fails (remaining paths are skipped)
            FilesystemError: If the staging directory cannot be managed
        """
        pairs = [(Path(rel), *mapping_paths(self.config, rel)) for rel in paths]
        staging = self.staging_root

        self._recreate_staging(staging)

        for rel, _, workspace_path in pairs:
            stage_path = staging / rel
            self.logger.debug(f"Staging {rel} from {workspace_path}")
            self.syncer.mirror(
                workspace_path,
                stage_path,
                SyncDirection.WORKSPACE_TO_ORIG,
                mirror_options(self.config, rel),
            )

        for rel, orig_path, _ in pairs:
            stage_path = staging / rel
            self.logger.debug(f"Applying staged {rel} to {orig_path}")
            self.syncer.mirror(
                stage_path,
                orig_path,
                SyncDirection.WORKSPACE_TO_ORIG,
                mirror_options(self.config, rel),
            )

        log = self.logger.debug if noninteractive else self.logger.info
        log(f"Synced {len(pairs)} path(s) back to disk")

        try:
            shutil.rmtree(staging)
        except OSError as e:
            self.logger.warning(f"Failed to remove staging directory {staging}: {e}")

    def _recreate_staging(self, staging: Path) -> None:
        try:
            if os.path.lexists(staging):
                self.logger.debug(f"Removing stale staging directory {staging}")
                shutil.rmtree(staging)
            os.makedirs(staging)
        except OSError as e:
            raise FilesystemError(str(staging), 'recreate_staging', str(e))

    def pending_changes(self) -> DiffSummary:
        """Aggregate workspace -> origin drift over every source mapping.

        Raises:
            MirrorFailed: If any diff fails
        """
        summaries = []
        for rel in self.source_paths():
            orig_path, workspace_path = mapping_paths(self.config, rel)
            summaries.append(self.diff_engine.diff(
                workspace_path,
                orig_path,
                mirror_options(self.config, rel),
            ))
        return sum_summaries(summaries)

    def confirm_destructive(self, message: str, noninteractive: bool) -> bool:
        """Gate a destructive action on operator confirmation.

        Noninteractive callers always get True without a prompt.
        """
        if noninteractive:
            return True
        return self.confirmer(message, True)

    def paths_for_roles(
        self,
        roles: Sequence[SyncRole] = (),
        only: Sequence[Path] = (),
    ) -> List[Path]:
        """Select paths for an explicit sync.

        Explicit paths win. Otherwise sources are selected when no role or
        the source role is requested, plus build dirs whose tag is
        requested. Falls back to every source when nothing matched.
        """
        if only:
            return [Path(p) for p in only]

        selected: List[Path] = []
        if not roles or SyncRole.SOURCE in roles:
            selected.extend(self.source_paths())
        for role, build_type in ((SyncRole.CACHE, BuildDirType.CACHE),
                                 (SyncRole.SCRATCH, BuildDirType.SCRATCH)):
            if role in roles:
                selected.extend(self.config.raw.build_paths(build_type))

        selected = sorted(set(selected))
        if not selected:
            selected = self.source_paths()
        return selected

    def handle_on_exit(self, noninteractive: bool = False) -> bool:
        """Apply the shell-exit policy.

        Returns:
            True if a syncback ran
        """
        policy = self.config.raw.sync.on_exit
        if policy == SyncOnExit.NEVER:
            self.logger.debug("Sync on exit disabled")
            return False

        paths = self.source_paths()
        if policy == SyncOnExit.AUTO:
            self.syncback(paths, noninteractive=True)
            return True

        if not self.pending_changes().has_changes:
            self.logger.debug("No pending changes on exit")
            return False
        if not self.confirm_destructive("Sync changes back to disk?", noninteractive):
            self.logger.info("Leaving workspace changes unsynced")
            return False
        self.syncback(paths, noninteractive=noninteractive)
        return True

"""Workspace lifecycle: provisioning and destruction of the RAM workspace.

A workspace is either absent or provisioned. ensure() provisions it (and
re-syncs sources when it already exists); delete() returns it to absent.
"""

import logging
import shutil
from pathlib import Path
from typing import List, Optional

from ramws.config.errors import FilesystemError
from ramws.config.models import BuildDirType, ResolvedConfig
from ramws.config.paths import ensure_dir, ensure_within_root
from ramws.syncer.mappings import mapping_paths, mirror_options
from ramws.syncer.models import SyncDirection
from ramws.syncer.path_syncer import PathSyncer, RsyncPathSyncer

from .errors import CapacityQueryFailed
from .fs_status import is_tmpfs

logger = logging.getLogger(__name__)


class Workspace:
    """RAM workspace for one project.

    Example:
        >>> workspace = Workspace(resolved_config)
        >>> workspace.ensure()
        >>> workspace.exists()
        True
        >>> workspace.delete()
    """

    def __init__(
        self,
        config: ResolvedConfig,
        syncer: Optional[PathSyncer] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.syncer = syncer or RsyncPathSyncer()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def root(self) -> Path:
        return self.config.workspace_root

    def ensure(self, refresh_sources_only: bool = False) -> None:
        """Create the workspace if needed and populate every source mapping.

        Idempotent: on an existing workspace this just re-syncs the sources
        from disk.

        Args:
            refresh_sources_only: Skip creating build directories

        Raises:
            PathEscapeError: If any mapping resolves outside its root
                (checked before anything is created or copied)
            FilesystemError: If a directory cannot be created
            MirrorFailed: If populating a source fails
        """
        sources = [
            (source, *mapping_paths(self.config, Path(source.path)))
            for source in self.config.raw.sources
        ]
        build_paths = [
            ensure_within_root(self.root, self.root / build.path)
            for build in self.config.raw.build_dirs
        ]

        ensure_dir(self.root)
        self._warn_if_not_tmpfs()

        if not refresh_sources_only:
            for path in build_paths:
                ensure_dir(path)

        for source, orig_path, workspace_path in sources:
            ensure_dir(workspace_path)
            self.logger.debug(f"Populating {workspace_path} from {orig_path}")
            self.syncer.mirror(
                orig_path,
                workspace_path,
                SyncDirection.ORIG_TO_WORKSPACE,
                mirror_options(self.config, Path(source.path)),
            )
        self.logger.info(f"Workspace ready at {self.root}")

    def _warn_if_not_tmpfs(self) -> None:
        try:
            on_tmpfs = is_tmpfs(self.root)
        except CapacityQueryFailed as e:
            self.logger.warning(f"Could not determine filesystem of {self.root}: {e.reason}")
            return
        if not on_tmpfs:
            self.logger.warning(
                f"Workspace {self.root} is not on tmpfs; performance may be lower"
            )

    def exists(self) -> bool:
        return self.root.exists()

    def delete(self) -> None:
        """Remove the workspace tree. Unsynced changes are lost.

        Raises:
            FilesystemError: If removal fails
        """
        if not self.exists():
            return
        self.logger.info(f"Removing workspace {self.root}")
        try:
            shutil.rmtree(self.root)
        except OSError as e:
            raise FilesystemError(str(self.root), 'remove_workspace', str(e))

    def build_paths_by_role(self, role: BuildDirType) -> List[Path]:
        """Workspace paths of the build dirs tagged with role."""
        return [self.root / path for path in self.config.raw.build_paths(role)]

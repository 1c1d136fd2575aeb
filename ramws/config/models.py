"""Data models for workspace configuration.

This module defines all data models describing what gets mirrored into the
RAM workspace, which build directories live only there, and how syncing
back to disk behaves. All models use dataclasses for clean, type-safe data
structures.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

DEFAULT_WORKSPACE_TEMPLATE = "/dev/shm/ramws-${USER}/${PROJECT}"
DEFAULT_SOURCE_EXCLUDES = [".git/**", "build/**", "target/**", "node_modules/**"]


class BuildDirType(Enum):
    """Tag for workspace-only build directories.

    Only used to select which directories take part in an explicit sync;
    neither tag implies eviction or persistence behavior.
    """

    SCRATCH = "scratch"
    CACHE = "cache"


class SyncOnExit(Enum):
    """What to do with workspace changes when a shell session ends."""

    ASK = "ask"  # Prompt when there are pending diffs
    AUTO = "auto"  # Always sync back without prompting
    NEVER = "never"  # Leave the workspace untouched


@dataclass
class SourceSpec:
    """A subtree of the project that is mirrored into the workspace.

    Attributes:
        path: Path relative to the project root ("." for the whole project)
        include: Ordered include glob patterns (evaluated before excludes)
        exclude: Ordered exclude glob patterns
    """
    path: Path
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)


@dataclass
class BuildDirSpec:
    """A directory that only exists inside the workspace.

    Attributes:
        path: Path relative to the workspace root
        type: Role tag used by `ramws sync --role`
    """
    path: Path
    type: BuildDirType = BuildDirType.SCRATCH


@dataclass
class SyncPolicy:
    """Sync behavior shared by every mapping.

    Attributes:
        on_exit: Shell-exit policy
        delete: Remove destination entries that are absent from the source
    """
    on_exit: SyncOnExit = SyncOnExit.ASK
    delete: bool = True


@dataclass
class GitPolicy:
    """Git-related options kept in the config file."""
    require_clean: bool = False
    auto_stage_synced: bool = False


@dataclass
class RamwsConfig:
    """Contents of a .ramws.yml file.

    Attributes:
        workspace_root: Workspace path template (None means the default
            /dev/shm/ramws-${USER}/${PROJECT})
        sources: Mappings mirrored from the project into the workspace
        build_dirs: Workspace-only directories
        sync: Sync policy
        git: Git options
    """
    workspace_root: Optional[str] = None
    sources: List[SourceSpec] = field(default_factory=list)
    build_dirs: List[BuildDirSpec] = field(default_factory=list)
    sync: SyncPolicy = field(default_factory=SyncPolicy)
    git: GitPolicy = field(default_factory=GitPolicy)

    @classmethod
    def default(cls) -> "RamwsConfig":
        """Build the configuration written by `ramws init`."""
        return cls(
            sources=[SourceSpec(path=Path("."), exclude=list(DEFAULT_SOURCE_EXCLUDES))],
        )

    def build_paths(self, build_type: BuildDirType) -> List[Path]:
        """Paths of the build dirs carrying the given tag, in config order."""
        return [Path(build.path) for build in self.build_dirs if build.type == build_type]


@dataclass
class ResolvedConfig:
    """Configuration bound to a concrete project.

    Attributes:
        config_path: File the configuration was loaded from (display only)
        orig_root: Canonical project root on persistent storage
        workspace_root: Absolute workspace path derived from orig_root
        project_slug: Deterministic slug used in the workspace path
        raw: Parsed configuration
    """
    config_path: Path
    orig_root: Path
    workspace_root: Path
    project_slug: str
    raw: RamwsConfig

    def source_for(self, rel: Path) -> Optional[SourceSpec]:
        """Return the source mapping configured for rel, if any."""
        for source in self.raw.sources:
            if Path(source.path) == Path(rel):
                return source
        return None

"""Resolution of mapping paths into mirror endpoints and options.

Every mirror between the project and the workspace goes through here, so
the path-escape check always runs before a destructive mirror and every
mapping gets the same filter rules whichever direction it is synced in.
"""

from pathlib import Path
from typing import Optional, Tuple

from ramws.config.models import ResolvedConfig
from ramws.config.paths import STAGING_DIR_NAME, ensure_within_root

from .models import SyncOptions

# Never mirror the syncback staging tree itself, and never delete it
STAGING_EXCLUDE = f"/{STAGING_DIR_NAME}/"


def mapping_paths(config: ResolvedConfig, rel: Path) -> Tuple[Path, Path]:
    """Return (orig_path, workspace_path) for a mapping.

    Raises:
        PathEscapeError: If either side resolves outside its root
    """
    orig_path = ensure_within_root(config.orig_root, config.orig_root / rel)
    workspace_path = ensure_within_root(config.workspace_root, config.workspace_root / rel)
    return orig_path, workspace_path


def _nested_under(path: Path, parent: Path) -> Optional[str]:
    """Return path relative to parent as a posix string, None if not strictly below it."""
    path_parts = Path(path).parts
    parent_parts = Path(parent).parts
    if len(path_parts) <= len(parent_parts) or path_parts[:len(parent_parts)] != parent_parts:
        return None
    return "/".join(path_parts[len(parent_parts):])


def mirror_options(
    config: ResolvedConfig,
    rel: Path,
    itemize: bool = False,
    dry_run: bool = False,
) -> SyncOptions:
    """Build SyncOptions for a mapping.

    Configured source mappings contribute their include/exclude lists, plus
    an anchored exclude for every build dir inside them so workspace-only
    directories are neither copied nor deleted by a source mirror. Build
    dirs and ad-hoc paths are mirrored unfiltered. The global delete policy
    always applies.
    """
    source = config.source_for(rel)
    include = list(source.include) if source else []
    exclude = list(source.exclude) if source else []
    if source:
        for build in config.raw.build_dirs:
            nested = _nested_under(Path(build.path), Path(rel))
            if nested is not None:
                exclude.append(f"/{nested}/")
    exclude.append(STAGING_EXCLUDE)
    return SyncOptions(
        delete=config.raw.sync.delete,
        include=include,
        exclude=exclude,
        itemize=itemize,
        dry_run=dry_run,
    )

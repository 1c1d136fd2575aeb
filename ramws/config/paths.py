"""Project root discovery and workspace path derivation.

The workspace location is a pure function of the project's canonical path:
the same checkout always maps to the same RAM directory, so separate
invocations agree on where the workspace lives without storing any state.
"""

import hashlib
import logging
import os
from pathlib import Path

from .errors import ConfigNotFoundError, FilesystemError, PathEscapeError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".ramws.yml"
VCS_MARKER = ".git"
SLUG_HASH_LENGTH = 7
STAGING_DIR_NAME = ".ramws-staging"


def find_project_root(start: Path) -> Path:
    """Walk up from start to the first directory containing a .git directory.

    Falls back to the canonical start directory when no marker is found.

    Raises:
        FilesystemError: If start cannot be canonicalized
    """
    try:
        start = Path(start).resolve(strict=True)
    except OSError as e:
        raise FilesystemError(str(start), 'canonicalize', str(e))

    for candidate in (start, *start.parents):
        if (candidate / VCS_MARKER).is_dir():
            logger.debug(f"Project root found at {candidate}")
            return candidate
    return start


def project_slug(path: Path) -> str:
    """Derive '<name>-<sha1 prefix>' from the canonical path."""
    canonical = Path(path).resolve()
    name = canonical.name or "project"
    digest = hashlib.sha1(str(canonical).encode("utf-8")).hexdigest()
    return f"{name}-{digest[:SLUG_HASH_LENGTH]}"


def expand_placeholders(template: str, slug: str) -> str:
    """Expand ${PROJECT} and ${USER} in a workspace path template."""
    value = template.replace("${PROJECT}", slug)
    user = os.environ.get("USER")
    if user is not None:
        value = value.replace("${USER}", user)
    return value


def discover_config(root: Path) -> Path:
    """Find the nearest .ramws.yml at or above root.

    Raises:
        ConfigNotFoundError: If no config file exists up to the filesystem root
    """
    root = Path(root)
    for candidate in (root, *root.parents):
        config_path = candidate / CONFIG_FILE_NAME
        if config_path.exists():
            return config_path
    raise ConfigNotFoundError(str(root))


def ensure_within_root(root: Path, candidate: Path) -> Path:
    """Check that candidate resolves inside root and return the resolved path.

    Symlinks are followed and '..' segments collapsed before comparing, so
    a mapping cannot reach outside its tree through either.

    Raises:
        PathEscapeError: If the resolved candidate is not under root
    """
    resolved_root = Path(root).resolve()
    resolved = Path(candidate).resolve()
    if resolved != resolved_root and resolved_root not in resolved.parents:
        raise PathEscapeError(str(resolved), str(resolved_root))
    return resolved


def ensure_dir(path: Path) -> None:
    """Create path and its parents.

    Raises:
        FilesystemError: If the directory cannot be created
    """
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise FilesystemError(str(path), 'create_directory', str(e))


def staging_dir(orig_root: Path) -> Path:
    """Location of the transient syncback staging tree."""
    return Path(orig_root) / STAGING_DIR_NAME

"""One-directional tree mirroring.

This module provides the PathSyncer capability and its two implementations:

- RsyncPathSyncer drives the external rsync process (`rsync -a`), the
  default used by the CLI;
- LocalPathSyncer walks both trees in-process and reports changes in the
  same itemization format, for hosts without rsync and for tests.

Both copy everything present in the source (files, directories, symlinks)
onto the destination, update changed content, optionally delete destination
entries missing from the source, and support dry-run/itemize modes.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol

from .errors import MirrorFailed
from .filters import FilterRules
from .models import ItemizedChanges, SyncDirection, SyncOptions

logger = logging.getLogger(__name__)

RSYNC_BINARY = "rsync"

NEW_ENTRY_FLAGS = "+++++++++"
DELETING_PREFIX = "*deleting   "


class PathSyncer(Protocol):
    """Capability interface for mirroring source onto dest."""

    def mirror(
        self,
        source: Path,
        dest: Path,
        direction: SyncDirection,
        options: SyncOptions,
    ) -> ItemizedChanges:
        ...


def path_with_trailing_slash(path: Path) -> str:
    """Render path with a trailing separator ('contents of', for rsync)."""
    value = str(path)
    if not value.endswith(os.sep):
        value += os.sep
    return value


def _require_source(source: Path, dest: Path) -> None:
    if not Path(source).is_dir():
        raise MirrorFailed(
            str(source),
            str(dest),
            f"source directory {source} does not exist",
        )


def build_rsync_command(
    source: Path,
    dest: Path,
    direction: SyncDirection,
    options: SyncOptions,
    binary: str = RSYNC_BINARY,
) -> List[str]:
    """Build the rsync argument list for one mirror call.

    Includes are emitted before excludes, each group in caller order, so
    an explicit include wins over a broader exclude. The source always gets
    a trailing separator whatever the direction.
    """
    cmd = [binary, "-a"]
    if options.delete:
        cmd.append("--delete")
    if options.dry_run:
        cmd.append("--dry-run")
    if options.itemize:
        cmd.append("--itemize-changes")
    for pattern in options.include:
        cmd.append(f"--include={pattern}")
    for pattern in options.exclude:
        cmd.append(f"--exclude={pattern}")
    cmd.append(path_with_trailing_slash(source))
    cmd.append(str(dest))
    return cmd


class RsyncPathSyncer:
    """Mirror trees with the external rsync process.

    Example:
        >>> syncer = RsyncPathSyncer()
        >>> changes = syncer.mirror(
        ...     Path("/home/me/proj/src"),
        ...     Path("/dev/shm/ramws-me/proj-1a2b3c4/src"),
        ...     SyncDirection.ORIG_TO_WORKSPACE,
        ...     SyncOptions(delete=True),
        ... )
    """

    def __init__(self, binary: str = RSYNC_BINARY, logger: Optional[logging.Logger] = None):
        self.binary = binary
        self.logger = logger or logging.getLogger(__name__)

    def mirror(
        self,
        source: Path,
        dest: Path,
        direction: SyncDirection,
        options: SyncOptions,
    ) -> ItemizedChanges:
        """Run rsync for source -> dest.

        Returns:
            ItemizedChanges with rsync's stdout lines (empty unless itemizing)

        Raises:
            MirrorFailed: If the source is missing, rsync is not installed,
                or rsync exits non-zero
        """
        _require_source(source, dest)

        if not options.dry_run:
            # rsync only creates the last path component of dest
            try:
                os.makedirs(Path(dest).parent, exist_ok=True)
            except OSError as e:
                raise MirrorFailed(str(source), str(dest), str(e))

        cmd = build_rsync_command(source, dest, direction, options, self.binary)
        self.logger.debug(f"Running {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError:
            raise MirrorFailed(
                str(source),
                str(dest),
                f"{self.binary} command not found. Please install rsync.",
            )

        if result.returncode != 0:
            raise MirrorFailed(
                str(source),
                str(dest),
                result.stderr,
                returncode=result.returncode,
            )

        return ItemizedChanges(lines=result.stdout.splitlines())


class LocalPathSyncer:
    """Mirror trees in-process using os/shutil.

    Change detection uses size and modification time, like rsync's quick
    check. Files are copied with shutil.copy2 so timestamps are preserved
    and a second mirror finds nothing to do. Excluded destination entries
    are never deleted, matching rsync without --delete-excluded.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def mirror(
        self,
        source: Path,
        dest: Path,
        direction: SyncDirection,
        options: SyncOptions,
    ) -> ItemizedChanges:
        """Mirror source onto dest.

        Raises:
            MirrorFailed: If the source is missing or an OS operation fails
        """
        source = Path(source)
        dest = Path(dest)
        _require_source(source, dest)

        rules = FilterRules(options.include, options.exclude)
        lines: List[str] = []
        self.logger.debug(
            f"Mirroring {source} -> {dest} ({direction.value}, "
            f"delete={options.delete}, dry_run={options.dry_run})"
        )
        try:
            if not options.dry_run:
                os.makedirs(dest, exist_ok=True)
            if options.delete:
                self._delete_extraneous(source, dest, "", rules, options.dry_run, lines)
            self._copy_tree(source, dest, "", rules, options.dry_run, lines)
        except OSError as e:
            raise MirrorFailed(str(source), str(dest), str(e))

        return ItemizedChanges(lines=lines)

    def _copy_tree(
        self,
        src_dir: Path,
        dst_dir: Path,
        prefix: str,
        rules: FilterRules,
        dry_run: bool,
        lines: List[str],
    ) -> None:
        for entry in sorted(os.scandir(src_dir), key=lambda e: e.name):
            rel = prefix + entry.name
            target = dst_dir / entry.name
            is_dir = entry.is_dir(follow_symlinks=False)
            if not rules.is_included(rel, is_dir):
                continue

            if entry.is_symlink():
                self._copy_symlink(entry.path, target, rel, dry_run, lines)
            elif is_dir:
                if not (target.is_dir() and not target.is_symlink()):
                    lines.append(f"cd{NEW_ENTRY_FLAGS} {rel}/")
                    if not dry_run:
                        _remove(target)
                        os.mkdir(target)
                self._copy_tree(Path(entry.path), target, rel + "/", rules, dry_run, lines)
                if not dry_run:
                    shutil.copystat(entry.path, target)
            elif entry.is_file(follow_symlinks=False):
                flags = _file_flags(entry, target)
                if flags is None:
                    continue
                lines.append(f">f{flags} {rel}")
                if not dry_run:
                    if target.is_dir() and not target.is_symlink():
                        _remove(target)
                    shutil.copy2(entry.path, target, follow_symlinks=False)
            else:
                self.logger.debug(f"Skipping special file {entry.path}")

    def _copy_symlink(
        self,
        link_path: str,
        target: Path,
        rel: str,
        dry_run: bool,
        lines: List[str],
    ) -> None:
        link_target = os.readlink(link_path)
        if target.is_symlink() and os.readlink(target) == link_target:
            return
        flags = NEW_ENTRY_FLAGS if not os.path.lexists(target) else "c........"
        lines.append(f"cL{flags} {rel} -> {link_target}")
        if not dry_run:
            _remove(target)
            os.symlink(link_target, target)

    def _delete_extraneous(
        self,
        src_dir: Path,
        dst_dir: Path,
        prefix: str,
        rules: FilterRules,
        dry_run: bool,
        lines: List[str],
    ) -> None:
        if not dst_dir.is_dir() or dst_dir.is_symlink():
            return
        for entry in sorted(os.scandir(dst_dir), key=lambda e: e.name):
            rel = prefix + entry.name
            is_dir = entry.is_dir(follow_symlinks=False)
            if not rules.is_included(rel, is_dir):
                continue
            counterpart = src_dir / entry.name
            if not os.path.lexists(counterpart):
                _itemize_deletion(Path(entry.path), rel, is_dir, lines)
                if not dry_run:
                    _remove(Path(entry.path))
            elif is_dir and counterpart.is_dir() and not counterpart.is_symlink():
                self._delete_extraneous(counterpart, Path(entry.path), rel + "/", rules, dry_run, lines)


def _file_flags(entry: os.DirEntry, target: Path) -> Optional[str]:
    """Return the 9-character change flags for a regular file, None if up to date."""
    if not os.path.lexists(target) or target.is_symlink() or target.is_dir():
        return NEW_ENTRY_FLAGS
    src_stat = entry.stat(follow_symlinks=False)
    dst_stat = target.stat()
    size_differs = src_stat.st_size != dst_stat.st_size
    time_differs = src_stat.st_mtime_ns != dst_stat.st_mtime_ns
    if not size_differs and not time_differs:
        return None
    return "." + ("s" if size_differs else ".") + ("t" if time_differs else ".") + "......"


def _itemize_deletion(path: Path, rel: str, is_dir: bool, lines: List[str]) -> None:
    if is_dir:
        for root, dirs, files in os.walk(path, topdown=False):
            sub = os.path.relpath(root, path)
            base = rel if sub == "." else f"{rel}/{sub}"
            for name in sorted(files):
                lines.append(f"{DELETING_PREFIX}{base}/{name}")
            for name in sorted(dirs):
                lines.append(f"{DELETING_PREFIX}{base}/{name}/")
        lines.append(f"{DELETING_PREFIX}{rel}/")
    else:
        lines.append(f"{DELETING_PREFIX}{rel}")


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif os.path.lexists(path):
        os.unlink(path)

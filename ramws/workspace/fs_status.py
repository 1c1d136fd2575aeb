"""Backing filesystem metadata for the workspace.

Python's os.statvfs does not report the filesystem type, so this module
calls statfs(2) from libc through ctypes to get the type magic alongside
the block counts.
"""

import ctypes
import ctypes.util
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from .errors import CapacityQueryFailed

logger = logging.getLogger(__name__)

TMPFS_MAGIC = 0x01021994

BYTE_UNITS = ["B", "KiB", "MiB", "GiB", "TiB"]


class _FsId(ctypes.Structure):
    _fields_ = [("val", ctypes.c_int * 2)]


class _StatFs(ctypes.Structure):
    """Linux struct statfs."""
    _fields_ = [
        ("f_type", ctypes.c_long),
        ("f_bsize", ctypes.c_long),
        ("f_blocks", ctypes.c_ulong),
        ("f_bfree", ctypes.c_ulong),
        ("f_bavail", ctypes.c_ulong),
        ("f_files", ctypes.c_ulong),
        ("f_ffree", ctypes.c_ulong),
        ("f_fsid", _FsId),
        ("f_namelen", ctypes.c_long),
        ("f_frsize", ctypes.c_long),
        ("f_flags", ctypes.c_long),
        ("f_spare", ctypes.c_long * 4),
    ]


@dataclass
class FsStatus:
    """Filesystem metadata for a directory.

    Attributes:
        type_code: Filesystem magic number
        total: Total size in bytes
        free: Free bytes (including blocks reserved for root)
        available: Bytes available to the calling user
    """
    type_code: int
    total: int
    free: int
    available: int

    @property
    def used(self) -> int:
        return self.total - self.free

    @property
    def is_tmpfs(self) -> bool:
        return self.type_code == TMPFS_MAGIC

    @property
    def fs_type(self) -> str:
        """'tmpfs' for memory-backed filesystems, otherwise the hex magic."""
        if self.is_tmpfs:
            return "tmpfs"
        return f"0x{self.type_code:x}"


def _statfs(path: Path) -> _StatFs:
    if not sys.platform.startswith("linux"):
        raise CapacityQueryFailed(str(path), f"statfs is not supported on {sys.platform}")

    libc = ctypes.CDLL(ctypes.util.find_library("c"), use_errno=True)
    buf = _StatFs()
    if libc.statfs(os.fsencode(str(path)), ctypes.byref(buf)) != 0:
        errno = ctypes.get_errno()
        raise CapacityQueryFailed(str(path), os.strerror(errno))
    return buf


def fs_status(path: Path) -> FsStatus:
    """Query the filesystem backing path.

    Raises:
        CapacityQueryFailed: If the query fails
    """
    buf = _statfs(path)
    block_size = buf.f_frsize or buf.f_bsize
    return FsStatus(
        type_code=buf.f_type & 0xFFFFFFFF,
        total=buf.f_blocks * block_size,
        free=buf.f_bfree * block_size,
        available=buf.f_bavail * block_size,
    )


def is_tmpfs(path: Path) -> bool:
    """Return whether path lives on a memory-backed filesystem.

    Raises:
        CapacityQueryFailed: If the query fails
    """
    return fs_status(path).is_tmpfs


def format_bytes(num_bytes: int) -> str:
    """Render a byte count with binary units, e.g. '1.50 GiB'."""
    value = float(num_bytes)
    unit = 0
    while value >= 1024.0 and unit < len(BYTE_UNITS) - 1:
        value /= 1024.0
        unit += 1
    return f"{value:.2f} {BYTE_UNITS[unit]}"

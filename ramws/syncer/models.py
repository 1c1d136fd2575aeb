"""Data models for mirroring and diffing.

This module defines the options passed to a mirror call, the itemized
result it produces, and the aggregate change counts derived from it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, List


class SyncDirection(Enum):
    """Direction of a single mirror call."""

    ORIG_TO_WORKSPACE = "orig_to_workspace"
    WORKSPACE_TO_ORIG = "workspace_to_orig"


@dataclass
class SyncOptions:
    """Options for one mirror call.

    Attributes:
        delete: Remove destination entries absent from the source
        include: Include patterns, evaluated in order before excludes
        exclude: Exclude patterns, evaluated in order
        itemize: Emit per-entry change lines
        dry_run: Report what would change without touching the destination

    Example:
        >>> opts = SyncOptions(delete=True, exclude=[".git/**"])
        >>> preview = SyncOptions(itemize=True, dry_run=True)
    """
    delete: bool = False
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    itemize: bool = False
    dry_run: bool = False


@dataclass
class ItemizedChanges:
    """Itemization lines produced by a mirror call.

    Lines follow rsync's --itemize-changes format, e.g.
    '>f+++++++++ new.txt', '>f.st...... changed.txt', '*deleting   old.txt'.
    """
    lines: List[str] = field(default_factory=list)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


@dataclass
class DiffSummary:
    """Change counts for one workspace/origin comparison.

    Summaries add up, so per-mapping results can be combined with sum().

    Example:
        >>> total = DiffSummary(added=1) + DiffSummary(changed=2)
        >>> total.total
        3
    """
    added: int = 0
    changed: int = 0
    deleted: int = 0

    def __add__(self, other: "DiffSummary") -> "DiffSummary":
        if not isinstance(other, DiffSummary):
            return NotImplemented
        return DiffSummary(
            added=self.added + other.added,
            changed=self.changed + other.changed,
            deleted=self.deleted + other.deleted,
        )

    def __radd__(self, other):
        # Lets sum() start from its default of 0
        if other == 0:
            return self
        return self.__add__(other)

    @property
    def total(self) -> int:
        return self.added + self.changed + self.deleted

    @property
    def has_changes(self) -> bool:
        return self.total > 0


def sum_summaries(summaries: Iterable[DiffSummary]) -> DiffSummary:
    """Add up per-mapping summaries."""
    return sum(summaries, DiffSummary())


class SyncRole(Enum):
    """Categories of paths selectable for an explicit sync."""

    SOURCE = "source"
    CACHE = "cache"
    SCRATCH = "scratch"

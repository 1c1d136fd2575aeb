"""Typed exception hierarchy for workspace errors."""

from ramws.errors import RamwsError


class CapacityQueryFailed(RamwsError):
    """Raised when filesystem metadata for the workspace cannot be read.

    Non-fatal by contract: status reporting leaves capacity fields unset
    and workspace creation only loses its tmpfs advisory.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"Capacity query failed for {path}: {reason}")
        self.path = path
        self.reason = reason

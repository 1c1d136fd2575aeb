"""Typed exception hierarchy for mirror errors.

This module defines the errors raised while mirroring one tree onto another.
They carry the diagnostic text of the underlying process so the CLI can show
the user exactly what rsync complained about.
"""

from typing import Optional

from ramws.errors import RamwsError


class MirrorFailed(RamwsError):
    """Raised when a mirror operation fails.

    Attributes:
        source: Source tree of the failed mirror
        dest: Destination tree of the failed mirror
        diagnostics: Diagnostic text (rsync stderr or an explanation)
        returncode: Exit status of the mirroring process, if it ran
    """

    def __init__(self, source: str, dest: str, diagnostics: str, returncode: Optional[int] = None):
        message = f"Mirror {source} -> {dest} failed"
        if diagnostics:
            message += f": {diagnostics.strip()}"
        super().__init__(message)
        self.source = source
        self.dest = dest
        self.diagnostics = diagnostics
        self.returncode = returncode

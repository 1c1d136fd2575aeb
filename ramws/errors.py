"""Base exception for the ramws package.

Every error raised by ramws inherits from RamwsError so callers (mainly the
CLI layer) can catch application-level failures in one place. Subpackages
define their specific errors in their own errors.py modules.
"""


class RamwsError(Exception):
    """Base exception for all ramws errors.

    Use this to catch any application-level error from the workspace tool.
    """
    pass

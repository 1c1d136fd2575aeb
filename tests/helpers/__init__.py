"""Test helper modules for ramws tests.

This package provides utilities shared across the unit tests:
- tree_helpers: Snapshot file trees and wrap syncers to record or fail calls
"""

from .tree_helpers import FailingSyncer, RecordingSyncer, read_tree

__all__ = [
    'FailingSyncer',
    'RecordingSyncer',
    'read_tree',
]

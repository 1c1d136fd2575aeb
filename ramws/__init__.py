"""ramws: per-project RAM workspace orchestrator.

Keeps an ephemeral, memory-backed working copy of a project in sync with
the project on disk.
"""

__version__ = "0.1.0"

"""Root pytest configuration for all tests.

Provides a throwaway project tree on disk and ResolvedConfig objects that
bind it to a workspace directory under tmp_path, so sync tests run against
real files without touching /dev/shm.
"""

import pytest

from ramws.config.models import RamwsConfig, ResolvedConfig
from ramws.syncer.path_syncer import LocalPathSyncer


@pytest.fixture
def project(tmp_path):
    """Project on disk with a .git directory, one source subtree and a top-level file."""
    root = tmp_path / "project"
    (root / ".git").mkdir(parents=True)
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (root / "src").mkdir()
    (root / "src" / "main.py").write_text("print('hello')\n")
    (root / "README.md").write_text("# project\n")
    return root.resolve()


@pytest.fixture
def workspace_root(tmp_path):
    """Where the workspace lives (not created)."""
    return (tmp_path / "ws").resolve()


@pytest.fixture
def make_config(project, workspace_root):
    """Factory for a ResolvedConfig over the test project."""
    def _make(raw=None):
        return ResolvedConfig(
            config_path=project / ".ramws.yml",
            orig_root=project,
            workspace_root=workspace_root,
            project_slug="project-1234567",
            raw=raw if raw is not None else RamwsConfig.default(),
        )
    return _make


@pytest.fixture
def resolved(make_config):
    """ResolvedConfig with the default single '.' source."""
    return make_config()


@pytest.fixture
def local_syncer():
    return LocalPathSyncer()

"""Unit tests for syncer.path_syncer module."""

import os
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from ramws.syncer.diff_engine import summarize
from ramws.syncer.errors import MirrorFailed
from ramws.syncer.models import DiffSummary, SyncDirection, SyncOptions
from ramws.syncer.path_syncer import (
    LocalPathSyncer,
    RsyncPathSyncer,
    build_rsync_command,
    path_with_trailing_slash,
)
from tests.helpers import read_tree


class TestBuildRsyncCommand:
    """Test cases for build_rsync_command()."""

    def test_minimal_command(self):
        cmd = build_rsync_command(
            Path("/orig/src"), Path("/ws/src"), SyncDirection.ORIG_TO_WORKSPACE, SyncOptions()
        )

        assert cmd == ["rsync", "-a", "/orig/src/", "/ws/src"]

    def test_full_command_order(self):
        """Flags, then includes, then excludes, then source/ and dest."""
        options = SyncOptions(
            delete=True,
            include=["keep/**", "a.txt"],
            exclude=[".git/**", "/.ramws-staging/"],
            itemize=True,
            dry_run=True,
        )

        cmd = build_rsync_command(
            Path("/ws"), Path("/orig"), SyncDirection.WORKSPACE_TO_ORIG, options
        )

        assert cmd == [
            "rsync", "-a", "--delete", "--dry-run", "--itemize-changes",
            "--include=keep/**", "--include=a.txt",
            "--exclude=.git/**", "--exclude=/.ramws-staging/",
            "/ws/", "/orig",
        ]

    def test_custom_binary(self):
        cmd = build_rsync_command(
            Path("/a"), Path("/b"), SyncDirection.ORIG_TO_WORKSPACE, SyncOptions(), binary="/opt/rsync"
        )

        assert cmd[0] == "/opt/rsync"

    def test_trailing_slash_is_not_doubled(self):
        assert path_with_trailing_slash(Path("/a/b")) == "/a/b/"
        assert path_with_trailing_slash("/a/b/") == "/a/b/"


class TestRsyncPathSyncer:
    """Test cases for RsyncPathSyncer.mirror() with subprocess mocked."""

    @patch("ramws.syncer.path_syncer.subprocess.run")
    def test_returns_stdout_lines(self, mock_run, tmp_path):
        """Itemized output is returned line by line."""
        src = tmp_path / "src"
        src.mkdir()
        mock_run.return_value = Mock(
            returncode=0,
            stdout=">f+++++++++ new.txt\n*deleting   old.txt\n",
            stderr="",
        )

        changes = RsyncPathSyncer().mirror(
            src, tmp_path / "dest", SyncDirection.ORIG_TO_WORKSPACE, SyncOptions(itemize=True)
        )

        assert list(changes) == [">f+++++++++ new.txt", "*deleting   old.txt"]
        cmd = mock_run.call_args[0][0]
        assert cmd[-2] == f"{src}/"
        assert cmd[-1] == str(tmp_path / "dest")
        assert mock_run.call_args[1] == {"capture_output": True, "text": True}

    @patch("ramws.syncer.path_syncer.subprocess.run")
    def test_creates_dest_parent(self, mock_run, tmp_path):
        """rsync only creates the last component, so parents are made first."""
        src = tmp_path / "src"
        src.mkdir()
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")
        dest = tmp_path / "deep" / "nested" / "dest"

        RsyncPathSyncer().mirror(src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions())

        assert dest.parent.is_dir()

    @patch("ramws.syncer.path_syncer.subprocess.run")
    def test_dry_run_creates_nothing(self, mock_run, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")
        dest = tmp_path / "deep" / "dest"

        RsyncPathSyncer().mirror(src, dest, SyncDirection.WORKSPACE_TO_ORIG, SyncOptions(dry_run=True))

        assert not dest.parent.exists()

    @patch("ramws.syncer.path_syncer.subprocess.run")
    def test_nonzero_exit_raises_with_diagnostics(self, mock_run, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        mock_run.return_value = Mock(
            returncode=23,
            stdout="",
            stderr="rsync: some files could not be transferred\n",
        )

        with pytest.raises(MirrorFailed) as exc_info:
            RsyncPathSyncer().mirror(src, tmp_path / "d", SyncDirection.ORIG_TO_WORKSPACE, SyncOptions())

        assert exc_info.value.returncode == 23
        assert "could not be transferred" in exc_info.value.diagnostics
        assert "could not be transferred" in str(exc_info.value)

    @patch("ramws.syncer.path_syncer.subprocess.run")
    def test_missing_binary_raises(self, mock_run, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        mock_run.side_effect = FileNotFoundError("rsync")

        with pytest.raises(MirrorFailed) as exc_info:
            RsyncPathSyncer().mirror(src, tmp_path / "d", SyncDirection.ORIG_TO_WORKSPACE, SyncOptions())

        assert "command not found" in str(exc_info.value)
        assert exc_info.value.returncode is None

    @patch("ramws.syncer.path_syncer.subprocess.run")
    def test_missing_source_fails_before_running(self, mock_run, tmp_path):
        with pytest.raises(MirrorFailed) as exc_info:
            RsyncPathSyncer().mirror(
                tmp_path / "missing", tmp_path / "d", SyncDirection.ORIG_TO_WORKSPACE, SyncOptions()
            )

        assert "does not exist" in str(exc_info.value)
        mock_run.assert_not_called()


@pytest.fixture
def trees(tmp_path):
    """Source tree with nested content and an empty destination."""
    src = tmp_path / "src"
    (src / "sub" / "deeper").mkdir(parents=True)
    (src / "a.txt").write_text("alpha")
    (src / "sub" / "b.txt").write_text("beta")
    (src / "sub" / "deeper" / "c.txt").write_text("gamma")
    dest = tmp_path / "dest"
    return src, dest


class TestLocalPathSyncer:
    """Test cases for LocalPathSyncer on real directories."""

    def test_copies_new_tree_and_itemizes(self, trees, local_syncer):
        src, dest = trees

        changes = local_syncer.mirror(
            src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions(itemize=True)
        )

        assert read_tree(dest) == read_tree(src)
        assert ">f+++++++++ a.txt" in changes.lines
        assert "cd+++++++++ sub/" in changes.lines
        assert ">f+++++++++ sub/deeper/c.txt" in changes.lines
        assert summarize(changes) == DiffSummary(added=3)

    def test_second_mirror_is_a_no_op(self, trees, local_syncer):
        """Timestamps are preserved, so an unchanged tree itemizes nothing."""
        src, dest = trees
        local_syncer.mirror(src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions())

        changes = local_syncer.mirror(
            src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions(delete=True, itemize=True)
        )

        assert changes.lines == []

    def test_changed_file_is_updated(self, trees, local_syncer):
        src, dest = trees
        local_syncer.mirror(src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions())
        (src / "a.txt").write_text("alpha, now longer")

        changes = local_syncer.mirror(src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions())

        assert (dest / "a.txt").read_text() == "alpha, now longer"
        assert [line for line in changes if line.endswith(" a.txt")][0].startswith(">f.s")

    def test_delete_removes_extraneous_entries(self, trees, local_syncer):
        src, dest = trees
        local_syncer.mirror(src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions())
        (dest / "stale.txt").write_text("stale")
        (dest / "olddir").mkdir()
        (dest / "olddir" / "x.txt").write_text("x")

        changes = local_syncer.mirror(src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions(delete=True))

        assert not (dest / "stale.txt").exists()
        assert not (dest / "olddir").exists()
        assert "*deleting   stale.txt" in changes.lines
        assert "*deleting   olddir/x.txt" in changes.lines
        assert "*deleting   olddir/" in changes.lines

    def test_without_delete_extraneous_entries_survive(self, trees, local_syncer):
        src, dest = trees
        dest.mkdir()
        (dest / "stale.txt").write_text("stale")

        local_syncer.mirror(src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions())

        assert (dest / "stale.txt").exists()

    def test_dry_run_touches_nothing(self, trees, local_syncer):
        src, dest = trees

        changes = local_syncer.mirror(
            src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions(dry_run=True, itemize=True)
        )

        assert not dest.exists()
        assert summarize(changes).added == 3

    def test_excluded_entries_are_skipped_and_protected(self, trees, local_syncer):
        """Excludes apply to copying and shield destination entries from --delete."""
        src, dest = trees
        (src / "sub" / "skip.o").write_text("obj")
        dest.mkdir()
        (dest / "local.o").write_text("kept")

        local_syncer.mirror(
            src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions(delete=True, exclude=["*.o"])
        )

        assert not (dest / "sub" / "skip.o").exists()
        assert (dest / "local.o").read_text() == "kept"

    def test_symlinks_are_copied_as_links(self, trees, local_syncer):
        src, dest = trees
        os.symlink("a.txt", src / "link")

        changes = local_syncer.mirror(src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions(itemize=True))

        assert (dest / "link").is_symlink()
        assert os.readlink(dest / "link") == "a.txt"
        assert "cL+++++++++ link -> a.txt" in changes.lines

    def test_file_replaced_by_directory(self, trees, local_syncer):
        src, dest = trees
        dest.mkdir()
        (dest / "sub").write_text("was a file")

        local_syncer.mirror(src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions())

        assert (dest / "sub" / "b.txt").read_text() == "beta"

    def test_missing_source_raises(self, tmp_path, local_syncer):
        with pytest.raises(MirrorFailed):
            local_syncer.mirror(
                tmp_path / "missing", tmp_path / "d", SyncDirection.ORIG_TO_WORKSPACE, SyncOptions()
            )

    def test_os_errors_become_mirror_failed(self, trees, local_syncer):
        src, dest = trees

        with patch("ramws.syncer.path_syncer.shutil.copy2", side_effect=PermissionError("denied")):
            with pytest.raises(MirrorFailed) as exc_info:
                local_syncer.mirror(src, dest, SyncDirection.ORIG_TO_WORKSPACE, SyncOptions())

        assert "denied" in exc_info.value.diagnostics

"""Unit tests for cli.shell module."""

from unittest.mock import Mock, patch

from ramws.cli.shell import ShellOptions, run_shell, shell_argv, shell_env


class TestShellArgv:
    """Test cases for shell_argv()."""

    def test_interactive_uses_shell_from_environment(self):
        assert shell_argv(ShellOptions(), {"SHELL": "/bin/zsh"}) == ["/bin/zsh", "-i"]

    def test_falls_back_to_bash(self):
        assert shell_argv(ShellOptions(), {}) == ["/bin/bash", "-i"]

    def test_explicit_shell_wins(self):
        assert shell_argv(ShellOptions(shell="/bin/fish"), {"SHELL": "/bin/zsh"})[0] == "/bin/fish"

    def test_command_runs_through_login_shell(self):
        opts = ShellOptions(command=["make", "-j4", "test"])

        assert shell_argv(opts, {"SHELL": "/bin/sh"}) == ["/bin/sh", "-lc", "make -j4 test"]


class TestShellEnv:
    """Test cases for shell_env()."""

    def test_sets_ramws_variables(self, resolved, project, workspace_root):
        env = shell_env(resolved, ShellOptions(), {"HOME": "/home/me"})

        assert env["HOME"] == "/home/me"
        assert env["RAMWS_ACTIVE"] == "1"
        assert env["RAMWS_LEVEL"] == "1"
        assert env["RAMWS_ORIG_ROOT"] == str(project)
        assert env["RAMWS_WS_ROOT"] == str(workspace_root)
        assert env["RAMWS_CONFIG"] == str(project / ".ramws.yml")

    def test_nested_shell_increments_level(self, resolved):
        env = shell_env(resolved, ShellOptions(), {"RAMWS_LEVEL": "2"})

        assert env["RAMWS_LEVEL"] == "3"

    def test_invalid_level_resets(self, resolved):
        env = shell_env(resolved, ShellOptions(), {"RAMWS_LEVEL": "deep"})

        assert env["RAMWS_LEVEL"] == "1"

    def test_prompt_is_prefixed(self, resolved):
        env = shell_env(resolved, ShellOptions(), {"PS1": "$ "})

        assert env["PS1"] == "(ramws) $ "

    def test_default_prompt_when_unset(self, resolved):
        env = shell_env(resolved, ShellOptions(), {})

        assert env["PS1"].startswith("(ramws) ")

    def test_no_prompt_leaves_ps1_alone(self, resolved):
        env = shell_env(resolved, ShellOptions(no_prompt=True), {"PS1": "$ "})

        assert env["PS1"] == "$ "

    def test_does_not_modify_input_environment(self, resolved):
        environ = {"PS1": "$ "}

        shell_env(resolved, ShellOptions(), environ)

        assert environ == {"PS1": "$ "}


class TestRunShell:
    """Test cases for run_shell()."""

    @patch("ramws.cli.shell.subprocess.run")
    def test_runs_in_workspace(self, mock_run, resolved, workspace_root):
        mock_run.return_value = Mock(returncode=7)

        code = run_shell(resolved, ShellOptions(shell="/bin/sh", command=["true"]))

        assert code == 7
        args, kwargs = mock_run.call_args
        assert args[0] == ["/bin/sh", "-lc", "true"]
        assert kwargs["cwd"] == str(workspace_root)
        assert kwargs["env"]["RAMWS_ACTIVE"] == "1"

    @patch("ramws.cli.shell.subprocess.run")
    def test_signal_death_maps_to_one(self, mock_run, resolved):
        mock_run.return_value = Mock(returncode=-9)

        assert run_shell(resolved, ShellOptions(shell="/bin/sh")) == 1

"""Unit tests for cli.init_command.InitCommand module."""

import pytest

from ramws.cli.errors import InitError
from ramws.cli.init_command import InitCommand
from ramws.config.config_loader import ConfigLoader
from ramws.config.models import RamwsConfig


class TestInitCommandRun:
    """Test cases for InitCommand.run() method."""

    def test_writes_default_config_at_project_root(self, project):
        nested = project / "src"
        init = InitCommand()

        config_path = init.run(nested)

        assert config_path == project / ".ramws.yml"
        assert init.config_path == config_path
        assert ConfigLoader.load(str(config_path)) == RamwsConfig.default()

    def test_existing_config_requires_force(self, project):
        (project / ".ramws.yml").write_text("sync:\n  on_exit: never\n")

        with pytest.raises(InitError) as exc_info:
            InitCommand().run(project)

        assert "already exists" in str(exc_info.value)
        assert "never" in (project / ".ramws.yml").read_text()

    def test_force_overwrites(self, project):
        (project / ".ramws.yml").write_text("sync:\n  on_exit: never\n")

        InitCommand().run(project, force=True)

        assert ConfigLoader.load(str(project / ".ramws.yml")) == RamwsConfig.default()

    def test_template_hint_does_not_change_output(self, project):
        InitCommand().run(project, template="rust")

        assert ConfigLoader.load(str(project / ".ramws.yml")) == RamwsConfig.default()

    def test_missing_start_directory(self, tmp_path):
        with pytest.raises(InitError):
            InitCommand().run(tmp_path / "missing")

"""InitCommand for configuration initialization.

This module implements `ramws init`, which writes a default .ramws.yml at
the project root.
"""

import logging
from pathlib import Path
from typing import Optional

from ramws.config.config_loader import ConfigLoader
from ramws.config.errors import FilesystemError
from ramws.config.models import RamwsConfig
from ramws.config.paths import CONFIG_FILE_NAME, find_project_root

from .errors import InitError

logger = logging.getLogger(__name__)


class InitCommand:
    """Handles creation of the default configuration file.

    Example:
        >>> init = InitCommand()
        >>> init.run(Path.cwd())
        >>> init.config_path
        PosixPath('/home/me/proj/.ramws.yml')
    """

    def __init__(self):
        self.config_path: Optional[Path] = None

    def run(self, start: Path, force: bool = False, template: Optional[str] = None) -> Path:
        """Write the default config for the project containing start.

        Args:
            start: Directory inside the project
            force: Overwrite an existing config file
            template: Template name hint (only echoed back to the user)

        Returns:
            Path of the written config file

        Raises:
            InitError: If the config exists and force is not set, or it
                cannot be written
        """
        try:
            project_root = find_project_root(start)
        except FilesystemError as e:
            raise InitError(str(e))

        self.config_path = project_root / CONFIG_FILE_NAME
        if self.config_path.exists() and not force:
            raise InitError(
                f"{self.config_path} already exists; use --force to overwrite"
            )

        try:
            ConfigLoader.save(str(self.config_path), RamwsConfig.default())
        except FilesystemError as e:
            raise InitError(f"Failed to write config: {e}")

        logger.info(f"Created {self.config_path}")
        if template:
            logger.debug(f"Template hint '{template}' recorded, no template logic applied")
        return self.config_path

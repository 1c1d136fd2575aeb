"""YAML configuration loading, validation and resolution.

This module reads and writes .ramws.yml files and binds a parsed
configuration to a concrete project root, producing the ResolvedConfig the
workspace, sync and status components consume.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .errors import ConfigError, ConfigNotFoundError, FilesystemError
from .models import (
    DEFAULT_WORKSPACE_TEMPLATE,
    BuildDirSpec,
    BuildDirType,
    GitPolicy,
    RamwsConfig,
    ResolvedConfig,
    SourceSpec,
    SyncOnExit,
    SyncPolicy,
)
from .paths import expand_placeholders, project_slug

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Configuration file structure:
        workspace:
          root: /dev/shm/ramws-${USER}/${PROJECT}
        sources:
          - path: .
            include: []
            exclude: [".git/**", "build/**"]
        build_dirs:
          - path: build
            type: scratch
        sync:
          on_exit: ask
          delete: true
        git:
          require_clean: false
          auto_stage_synced: false

    Every section is optional. A missing 'sources' section means the
    default single mapping of the whole project.
    """

    @classmethod
    def load(cls, config_path: str) -> RamwsConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            RamwsConfig object with parsed configuration

        Raises:
            ConfigNotFoundError: If the file does not exist
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise ConfigNotFoundError(str(config_path))
        except PermissionError:
            raise FilesystemError(
                str(config_path),
                'read',
                'Permission denied'
            )
        except OSError as e:
            raise FilesystemError(
                str(config_path),
                'read',
                str(e)
            )

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        # An empty file is a valid "all defaults" config
        if config_dict is None:
            return RamwsConfig.default()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def save(cls, config_path: str, config: RamwsConfig) -> None:
        """Save configuration to a YAML file.

        Raises:
            FilesystemError: If file cannot be written
        """
        config_dict = cls.to_dict(config)

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(str(config_path))
        if config_dir:
            try:
                os.makedirs(config_dir, exist_ok=True)
            except OSError as e:
                raise FilesystemError(
                    config_dir,
                    'create_directory',
                    str(e)
                )

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise FilesystemError(
                str(config_path),
                'write',
                'Permission denied'
            )
        except OSError as e:
            raise FilesystemError(
                str(config_path),
                'write',
                str(e)
            )

    @classmethod
    def resolve(cls, config_path: Path, orig_root: Path) -> ResolvedConfig:
        """Load config_path and bind it to orig_root.

        The workspace root comes from the configured template (or the
        default one) with ${PROJECT} and ${USER} expanded.
        """
        config = cls.load(str(config_path))
        orig_root = Path(orig_root).resolve()
        slug = project_slug(orig_root)
        template = config.workspace_root or DEFAULT_WORKSPACE_TEMPLATE
        workspace_root = Path(expand_placeholders(template, slug))
        if not workspace_root.is_absolute():
            raise ConfigError(
                f"Workspace root must be absolute, got {workspace_root}",
                'workspace.root'
            )
        logger.debug(f"Resolved workspace root {workspace_root} for {orig_root}")
        return ResolvedConfig(
            config_path=Path(config_path),
            orig_root=orig_root,
            workspace_root=workspace_root,
            project_slug=slug,
            raw=config,
        )

    @classmethod
    def to_dict(cls, config: RamwsConfig) -> Dict[str, Any]:
        """Convert a RamwsConfig into the YAML document structure."""
        return {
            'workspace': {'root': config.workspace_root},
            'sources': [
                {
                    'path': str(source.path),
                    'include': list(source.include),
                    'exclude': list(source.exclude),
                }
                for source in config.sources
            ],
            'build_dirs': [
                {'path': str(build.path), 'type': build.type.value}
                for build in config.build_dirs
            ],
            'sync': {
                'on_exit': config.sync.on_exit.value,
                'delete': config.sync.delete,
            },
            'git': {
                'require_clean': config.git.require_clean,
                'auto_stage_synced': config.git.auto_stage_synced,
            },
        }

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> RamwsConfig:
        """Parse and validate configuration dictionary.

        Raises:
            ConfigError: If configuration is invalid
        """
        workspace = cls._section(config_dict, 'workspace')
        workspace_root = workspace.get('root')
        if workspace_root is not None and not isinstance(workspace_root, str):
            raise ConfigError(
                f"Field 'root' must be a string, got {type(workspace_root).__name__}",
                'workspace.root'
            )

        if 'sources' in config_dict and config_dict['sources'] is not None:
            sources = cls._parse_sources(config_dict['sources'])
        else:
            sources = RamwsConfig.default().sources

        build_dirs = cls._parse_build_dirs(config_dict.get('build_dirs') or [])

        sync_dict = cls._section(config_dict, 'sync')
        on_exit_raw = sync_dict.get('on_exit', SyncOnExit.ASK.value)
        try:
            on_exit = SyncOnExit(str(on_exit_raw).lower())
        except ValueError:
            raise ConfigError(
                f"Unknown value '{on_exit_raw}', expected one of: ask, auto, never",
                'sync.on_exit'
            )
        delete = cls._bool(sync_dict.get('delete', True), 'sync.delete')

        git_dict = cls._section(config_dict, 'git')
        git = GitPolicy(
            require_clean=cls._bool(git_dict.get('require_clean', False), 'git.require_clean'),
            auto_stage_synced=cls._bool(
                git_dict.get('auto_stage_synced', False), 'git.auto_stage_synced'
            ),
        )

        return RamwsConfig(
            workspace_root=workspace_root,
            sources=sources,
            build_dirs=build_dirs,
            sync=SyncPolicy(on_exit=on_exit, delete=delete),
            git=git,
        )

    @classmethod
    def _parse_sources(cls, sources_raw: Any) -> List[SourceSpec]:
        if not isinstance(sources_raw, list):
            raise ConfigError("Field 'sources' must be a list", 'sources')

        sources = []
        for i, source_dict in enumerate(sources_raw):
            if not isinstance(source_dict, dict):
                raise ConfigError(
                    f"Source at index {i} must be a dictionary",
                    f'sources[{i}]'
                )
            path = source_dict.get('path')
            if path is None or not str(path).strip():
                raise ConfigError(
                    f"Missing required field 'path' in source {i}",
                    f'sources[{i}].path'
                )
            sources.append(SourceSpec(
                path=Path(str(path)),
                include=cls._patterns(source_dict.get('include'), f'sources[{i}].include'),
                exclude=cls._patterns(source_dict.get('exclude'), f'sources[{i}].exclude'),
            ))
        return sources

    @classmethod
    def _parse_build_dirs(cls, build_raw: Any) -> List[BuildDirSpec]:
        if not isinstance(build_raw, list):
            raise ConfigError("Field 'build_dirs' must be a list", 'build_dirs')

        build_dirs = []
        for i, build_dict in enumerate(build_raw):
            if not isinstance(build_dict, dict):
                raise ConfigError(
                    f"Build dir at index {i} must be a dictionary",
                    f'build_dirs[{i}]'
                )
            path = build_dict.get('path')
            if path is None or not str(path).strip():
                raise ConfigError(
                    f"Missing required field 'path' in build dir {i}",
                    f'build_dirs[{i}].path'
                )
            type_raw = build_dict.get('type', BuildDirType.SCRATCH.value)
            try:
                build_type = BuildDirType(str(type_raw).lower())
            except ValueError:
                raise ConfigError(
                    f"Unknown build dir type '{type_raw}', expected scratch or cache",
                    f'build_dirs[{i}].type'
                )
            build_dirs.append(BuildDirSpec(path=Path(str(path)), type=build_type))
        return build_dirs

    @staticmethod
    def _section(config_dict: Dict[str, Any], name: str) -> Dict[str, Any]:
        section = config_dict.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigError(
                f"Section '{name}' must be a dictionary, got {type(section).__name__}",
                name
            )
        return section

    @staticmethod
    def _patterns(raw: Any, field_name: str) -> List[str]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise ConfigError(f"Field '{field_name}' must be a list", field_name)
        return [str(pattern) for pattern in raw]

    @staticmethod
    def _bool(raw: Any, field_name: str) -> bool:
        if not isinstance(raw, bool):
            raise ConfigError(
                f"Field must be a boolean, got {type(raw).__name__}",
                field_name
            )
        return raw

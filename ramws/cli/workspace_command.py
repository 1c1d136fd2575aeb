"""Workspace command orchestration for CLI.

This module provides the WorkspaceCommand class behind `ramws start`,
`shell`, `sync`, `status` and `destroy`. It wires the resolved config into
the Workspace, SyncOrchestrator and StatusReporter, and translates library
exceptions into exit codes and user-facing messages.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from ramws.config.config_loader import ConfigLoader
from ramws.config.errors import PathEscapeError
from ramws.config.models import ResolvedConfig
from ramws.config.paths import discover_config, find_project_root
from ramws.errors import RamwsError
from ramws.syncer.errors import MirrorFailed
from ramws.syncer.models import SyncRole
from ramws.syncer.orchestrator import Confirmer, SyncOrchestrator
from ramws.syncer.path_syncer import PathSyncer, RsyncPathSyncer
from ramws.workspace.lifecycle import Workspace
from ramws.workspace.status import StatusReporter

from .models import ExitCode
from .output import OutputHandler
from .shell import ShellOptions, run_shell

logger = logging.getLogger(__name__)


def load_resolved_config(
    chdir: Optional[Path] = None,
    config_path: Optional[Path] = None,
) -> ResolvedConfig:
    """Locate the project and its config, and resolve them.

    Raises:
        FilesystemError: If the start directory cannot be read
        ConfigNotFoundError: If no config file is found
        ConfigError: If the config is invalid
    """
    base = Path(chdir) if chdir else Path.cwd()
    orig_root = find_project_root(base)
    path = Path(config_path) if config_path else discover_config(orig_root)
    logger.debug(f"Using config {path} for project {orig_root}")
    return ConfigLoader.resolve(path, orig_root)


class WorkspaceCommand:
    """Runs workspace commands against one resolved configuration.

    Every public method returns an ExitCode; errors are reported through
    the output handler instead of being raised.

    Example:
        >>> cmd = WorkspaceCommand(load_resolved_config(), OutputHandler())
        >>> cmd.start()
        <ExitCode.SUCCESS: 0>
    """

    def __init__(
        self,
        config: ResolvedConfig,
        output_handler: Optional[OutputHandler] = None,
        syncer: Optional[PathSyncer] = None,
        confirmer: Optional[Confirmer] = None,
    ):
        self.config = config
        self.output_handler = output_handler or OutputHandler()
        self.syncer = syncer or RsyncPathSyncer()
        self.workspace = Workspace(config, syncer=self.syncer)
        self.orchestrator = SyncOrchestrator(config, syncer=self.syncer, confirmer=confirmer)
        self.reporter = StatusReporter(config, syncer=self.syncer)

    def _guarded(self, action: Callable[[], ExitCode]) -> ExitCode:
        try:
            return action()
        except PathEscapeError as e:
            logger.error(f"Path escape: {e}")
            self.output_handler.error(f"Refusing to sync: {e}")
            return ExitCode.PATH_ESCAPE
        except MirrorFailed as e:
            logger.error(f"Mirror failed: {e}")
            self.output_handler.error(str(e))
            return ExitCode.SYNC_ERROR
        except RamwsError as e:
            logger.error(f"Command failed: {e}")
            self.output_handler.error(str(e))
            return ExitCode.GENERAL_ERROR
        except OSError as e:
            logger.exception("Unexpected OS error")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def start(self, refresh_sources_only: bool = False) -> ExitCode:
        def action() -> ExitCode:
            with self.output_handler.spinner("Populating workspace..."):
                self.workspace.ensure(refresh_sources_only=refresh_sources_only)
            self.output_handler.success(f"Workspace ready at {self.config.workspace_root}")
            return ExitCode.SUCCESS
        return self._guarded(action)

    def sync(
        self,
        back: bool = True,
        only: Sequence[Path] = (),
        roles: Sequence[SyncRole] = (),
        noninteractive: bool = False,
    ) -> ExitCode:
        """Sync selected paths back to disk (back=True) or refresh them from disk."""
        def action() -> ExitCode:
            paths = self.orchestrator.paths_for_roles(roles=roles, only=only)
            listed = ", ".join(str(p) for p in paths)
            if back:
                with self.output_handler.spinner("Syncing back to disk..."):
                    self.orchestrator.syncback(paths, noninteractive=noninteractive)
                self.output_handler.success(f"Synced back: {listed}")
            else:
                with self.output_handler.spinner("Refreshing from disk..."):
                    self.orchestrator.refresh(paths)
                self.output_handler.success(f"Refreshed: {listed}")
            return ExitCode.SUCCESS
        return self._guarded(action)

    def status(self, as_json: bool = False) -> ExitCode:
        def action() -> ExitCode:
            snapshot = self.reporter.snapshot()
            if as_json:
                self.output_handler.print_json(snapshot.to_dict())
            else:
                self.output_handler.print_status(snapshot)
            return ExitCode.SUCCESS
        return self._guarded(action)

    def destroy(self, force: bool = False, noninteractive: bool = False) -> ExitCode:
        def action() -> ExitCode:
            if not self.workspace.exists():
                self.output_handler.print(
                    f"workspace not found at {self.config.workspace_root}"
                )
                return ExitCode.SUCCESS
            if not force:
                pending = self.reporter.snapshot().diff
                if pending.has_changes and not self.orchestrator.confirm_destructive(
                    "Unsynced changes detected. Delete workspace?", noninteractive
                ):
                    self.output_handler.warning("Workspace kept")
                    return ExitCode.SUCCESS
            self.workspace.delete()
            self.output_handler.success(f"Removed {self.config.workspace_root}")
            return ExitCode.SUCCESS
        return self._guarded(action)

    def shell(
        self,
        shell: Optional[str] = None,
        no_prompt: bool = False,
        noninteractive: bool = False,
        command: Optional[List[str]] = None,
    ) -> int:
        """Run a shell in the workspace, then apply the on-exit policy.

        Returns:
            The shell's exit code, or an ExitCode if setup or the exit sync failed
        """
        shell_code = 0

        def action() -> ExitCode:
            nonlocal shell_code
            self.workspace.ensure()
            shell_code = run_shell(
                self.config,
                ShellOptions(shell=shell, no_prompt=no_prompt, command=list(command or [])),
            )
            if self.orchestrator.handle_on_exit(noninteractive=noninteractive):
                self.output_handler.success("Workspace changes synced back to disk")
            return ExitCode.SUCCESS

        exit_code = self._guarded(action)
        if exit_code != ExitCode.SUCCESS:
            return exit_code
        return shell_code

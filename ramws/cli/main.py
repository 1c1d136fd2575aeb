"""Main CLI entry point for the ramws command.

This module provides the Typer application that serves as the entry point
for the ramws command-line tool: global options live on the callback and
each workspace operation is a subcommand.
"""

import logging
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer

from ramws import __version__
from ramws.cli.errors import InitError
from ramws.cli.init_command import InitCommand
from ramws.cli.models import ExitCode
from ramws.cli.output import OutputHandler
from ramws.cli.workspace_command import WorkspaceCommand, load_resolved_config
from ramws.errors import RamwsError
from ramws.syncer.models import SyncRole

app = typer.Typer(
    name="ramws",
    help="""Per-project RAM workspace orchestrator.

QUICK START:
  ramws init                     # Write .ramws.yml at the project root
  ramws start                    # Create and populate the RAM workspace
  ramws shell                    # Work inside the workspace
  ramws sync --back              # Workspace -> disk
  ramws sync --from              # Disk -> workspace
  ramws status                   # Capacity and pending changes
  ramws destroy                  # Remove the workspace""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=True,
)

# Module logger
logger = logging.getLogger(__name__)


@dataclass
class GlobalOptions:
    """Options given before the subcommand."""
    chdir: Optional[Path] = None
    config: Optional[Path] = None
    json: bool = False
    verbosity: int = 1
    no_color: bool = False


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'ramws' namespace logger to avoid affecting
    third-party libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("ramws")
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"ramws_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ramws version {__version__}")
        raise typer.Exit()


def _workspace_command(ctx: typer.Context) -> WorkspaceCommand:
    """Resolve the config and build the command runner, or exit with an error."""
    opts: GlobalOptions = ctx.obj
    output = OutputHandler(verbosity=opts.verbosity, no_color=opts.no_color)
    try:
        config = load_resolved_config(opts.chdir, opts.config)
    except RamwsError as e:
        logger.error(f"Failed to load configuration: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    return WorkspaceCommand(config, output_handler=output)


@app.callback()
def main_callback(
    ctx: typer.Context,
    chdir: Optional[Path] = typer.Option(
        None,
        "--chdir",
        "-C",
        help="Run as if started in this directory",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to .ramws.yml (default: discovered from the project root)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Machine-readable output where supported",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="More output (repeatable)",
    ),
    quiet: int = typer.Option(
        0,
        "--quiet",
        "-q",
        count=True,
        help="Less output (repeatable)",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Per-project RAM workspace orchestrator."""
    verbosity = max(0, min(2, 1 + verbose - quiet))
    _configure_logging(verbosity, logdir)
    ctx.obj = GlobalOptions(
        chdir=chdir,
        config=config,
        json=json_output,
        verbosity=verbosity,
        no_color=no_color,
    )


@app.command("init")
def init_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing .ramws.yml"),
    template: Optional[str] = typer.Option(None, "--template", help="Template name hint"),
) -> None:
    """Write a default .ramws.yml at the project root."""
    opts: GlobalOptions = ctx.obj
    output = OutputHandler(verbosity=opts.verbosity, no_color=opts.no_color)
    init_cmd = InitCommand()
    try:
        config_path = init_cmd.run(opts.chdir or Path.cwd(), force=force, template=template)
    except InitError as e:
        logger.error(f"Initialization failed: {e}")
        output.error(f"Initialization failed: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    output.print(f"created {config_path}")
    if template:
        output.print(
            f"template hint: {template} (no template logic implemented, adjust config manually)"
        )
    raise typer.Exit(ExitCode.SUCCESS)


@app.command("start")
def start_command(
    ctx: typer.Context,
    noninteractive: bool = typer.Option(False, "--noninteractive", help="Never prompt"),
    refresh_sources_only: bool = typer.Option(
        False,
        "--refresh-sources-only",
        help="Only re-sync sources, do not create build directories",
    ),
) -> None:
    """Create the workspace (if needed) and populate it from disk."""
    command = _workspace_command(ctx)
    raise typer.Exit(command.start(refresh_sources_only=refresh_sources_only))


@app.command(
    "shell",
    context_settings={"allow_interspersed_args": False, "ignore_unknown_options": True},
)
def shell_command(
    ctx: typer.Context,
    shell: Optional[str] = typer.Option(None, "--shell", help="Shell binary to launch"),
    no_prompt: bool = typer.Option(False, "--no-prompt", help="Do not prefix PS1"),
    noninteractive: bool = typer.Option(
        False,
        "--noninteractive",
        help="Apply the exit policy without prompting",
    ),
    command: Optional[List[str]] = typer.Argument(None, help="Command to run instead of a shell"),
) -> None:
    """Open a shell in the workspace; apply the sync-on-exit policy afterwards."""
    runner = _workspace_command(ctx)
    raise typer.Exit(runner.shell(
        shell=shell,
        no_prompt=no_prompt,
        noninteractive=noninteractive,
        command=command or [],
    ))


@app.command("sync")
def sync_command(
    ctx: typer.Context,
    back: bool = typer.Option(False, "--back", help="Workspace -> disk (default)"),
    from_disk: bool = typer.Option(False, "--from", help="Disk -> workspace"),
    only: Optional[List[Path]] = typer.Option(
        None,
        "--only",
        help="Sync only this path (repeatable)",
        metavar="PATH",
    ),
    roles: Optional[List[SyncRole]] = typer.Option(
        None,
        "--role",
        help="Select paths by role (repeatable)",
        case_sensitive=False,
    ),
    noninteractive: bool = typer.Option(False, "--noninteractive", help="Never prompt"),
) -> None:
    """Sync workspace paths back to disk, or refresh them from disk."""
    if back and from_disk:
        typer.echo("Error: --back and --from are mutually exclusive", err=True)
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    command = _workspace_command(ctx)
    raise typer.Exit(command.sync(
        back=not from_disk,
        only=only or [],
        roles=roles or [],
        noninteractive=noninteractive,
    ))


@app.command("status")
def status_command(ctx: typer.Context) -> None:
    """Show workspace capacity, pending changes and sync policy."""
    command = _workspace_command(ctx)
    raise typer.Exit(command.status(as_json=ctx.obj.json))


@app.command("destroy")
def destroy_command(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Skip the pending-changes check"),
    noninteractive: bool = typer.Option(False, "--noninteractive", help="Never prompt"),
) -> None:
    """Delete the workspace. Unsynced changes are lost."""
    command = _workspace_command(ctx)
    raise typer.Exit(command.destroy(force=force, noninteractive=noninteractive))


def main() -> None:
    """Main entry point for the CLI application."""
    app()


# Allow running as: python -m ramws.cli.main
if __name__ == "__main__":
    main()

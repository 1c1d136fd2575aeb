"""Interactive shell inside the workspace.

The shell runs with the workspace root as its working directory and a set
of RAMWS_* variables describing where it is, so nested tools (and nested
ramws invocations) can find the original project.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ramws.config.models import ResolvedConfig

logger = logging.getLogger(__name__)

DEFAULT_SHELL = "/bin/bash"
PROMPT_PREFIX = "(ramws)"


@dataclass
class ShellOptions:
    """Options for `ramws shell`.

    Attributes:
        shell: Shell binary (defaults to $SHELL, then /bin/bash)
        no_prompt: Leave PS1 untouched
        command: Command to run instead of an interactive session
    """
    shell: Optional[str] = None
    no_prompt: bool = False
    command: List[str] = field(default_factory=list)


def shell_argv(opts: ShellOptions, environ: Optional[Dict[str, str]] = None) -> List[str]:
    """Build the argv for the shell process."""
    environ = os.environ if environ is None else environ
    shell_bin = opts.shell or environ.get("SHELL") or DEFAULT_SHELL
    if opts.command:
        return [shell_bin, "-lc", " ".join(opts.command)]
    return [shell_bin, "-i"]


def shell_env(
    config: ResolvedConfig,
    opts: ShellOptions,
    environ: Optional[Dict[str, str]] = None,
) -> Dict[str, str]:
    """Build the environment for the shell process."""
    env = dict(os.environ if environ is None else environ)
    try:
        level = int(env.get("RAMWS_LEVEL", "0")) + 1
    except ValueError:
        level = 1
    env["RAMWS_ACTIVE"] = "1"
    env["RAMWS_LEVEL"] = str(level)
    env["RAMWS_ORIG_ROOT"] = str(config.orig_root)
    env["RAMWS_WS_ROOT"] = str(config.workspace_root)
    env["RAMWS_CONFIG"] = str(config.config_path)
    if not opts.no_prompt and not opts.command:
        if "PS1" in env:
            env["PS1"] = f"{PROMPT_PREFIX} {env['PS1']}"
        else:
            env["PS1"] = f"{PROMPT_PREFIX} \\u$ "
    return env


def run_shell(config: ResolvedConfig, opts: ShellOptions) -> int:
    """Run the shell in the workspace and return its exit code.

    The workspace must already be provisioned.
    """
    argv = shell_argv(opts)
    logger.info(f"Launching shell in {config.workspace_root}")
    result = subprocess.run(
        argv,
        cwd=str(config.workspace_root),
        env=shell_env(config, opts),
    )
    # Negative return codes mean the shell died from a signal
    return result.returncode if result.returncode >= 0 else 1

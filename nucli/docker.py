from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import ProjectConfig
from .context import CLIContext


def _format_args(args: Iterable[str]) -> str:
    return " ".join(shlex.quote(str(arg)) for arg in args)


def _compose_prefix(
    context: CLIContext,
    config: Optional[ProjectConfig] = None,
    env_file: Optional[Path] = None,
) -> List[str]:
    command = ["docker", "compose"]
    if env_file is not None:
        command.extend(["--env-file", str(env_file)])
    compose_file = context.compose_file(config)
    if compose_file is not None:
        command.extend(["-f", str(compose_file)])
    return command


def run_compose(
    context: CLIContext,
    args: Sequence[str],
    *,
    config: Optional[ProjectConfig] = None,
    env_file: Optional[Path] = None,
    check: bool = False,
) -> subprocess.CompletedProcess:
    command = _compose_prefix(context, config, env_file) + list(args)
    context.logger.info("docker compose %s", _format_args(command[2:]))
    return subprocess.run(
        command,
        check=check,
        cwd=str(context.project_dir),
        env=context.environment,
    )

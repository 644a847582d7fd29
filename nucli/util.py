from __future__ import annotations

import shutil
from typing import NoReturn, Optional

import typer

from .config import ConfigError, ProjectConfig
from .context import CLIContext
from .resolver import SERVICE_ORDER, InvalidServiceError

DOCKER_HINT = "Install Docker with the compose plugin: https://docs.docker.com/compose/install/"


def context_from(ctx: typer.Context) -> CLIContext:
    context = ctx.obj
    if not isinstance(context, CLIContext):
        raise RuntimeError("CLIContext is not initialised.")
    return context


def ensure_binary(binary: str, hint: Optional[str] = None) -> None:
    if shutil.which(binary):
        return
    message = f"{binary} is required for this command."
    if hint:
        message = f"{message} {hint}"
    typer.echo(message, err=True)
    raise typer.Exit(127)


def fail(message: str, code: int = 1) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code)


def load_config_or_exit(context: CLIContext) -> ProjectConfig:
    try:
        config = context.load_config()
    except ConfigError as exc:
        fail(str(exc))
    if config.service not in SERVICE_ORDER:
        fail(str(InvalidServiceError(config.service)))
    return config

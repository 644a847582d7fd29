from __future__ import annotations

import typer

from ..context import CLIContext
from ..docker import run_compose
from ..status import StatusError
from ..util import DOCKER_HINT, context_from, ensure_binary, fail, load_config_or_exit


def link_service(context: CLIContext) -> None:
    config = load_config_or_exit(context)
    ensure_binary("docker", DOCKER_HINT)

    typer.echo(f"Linking service: {config.name} ({config.service})")
    result = run_compose(context, ["up", "-d"], config=config)
    if result.returncode != 0:
        fail(f"docker compose up exited with status {result.returncode}; service not linked.")

    try:
        context.status_store.mark_linked(config.service, context.project_dir)
    except StatusError as exc:
        fail(str(exc))
    typer.echo("Service linked successfully.")


def unlink_service(context: CLIContext) -> None:
    config = load_config_or_exit(context)
    ensure_binary("docker", DOCKER_HINT)

    typer.echo(f"Unlinking service: {config.name} ({config.service})")
    result = run_compose(context, ["down"], config=config)
    if result.returncode != 0:
        fail(f"docker compose down exited with status {result.returncode}; service still linked.")

    try:
        context.status_store.mark_unlinked(config.service)
    except StatusError as exc:
        fail(str(exc))
    typer.echo("Service unlinked successfully.")


def register(app: typer.Typer) -> None:
    @app.command("link")
    def link(ctx: typer.Context) -> None:
        """Start this project's containers and record it as linked."""
        link_service(context_from(ctx))

    @app.command("unlink")
    def unlink(ctx: typer.Context) -> None:
        """Stop this project's containers and record it as unlinked."""
        unlink_service(context_from(ctx))

from __future__ import annotations

from typing import Optional

import typer

from ..context import CLIContext
from ..docker import run_compose
from ..envfile import write_env_file
from ..resolver import EnvironmentResolutionError, resolve
from ..status import StatusError
from ..util import DOCKER_HINT, context_from, ensure_binary, fail, load_config_or_exit

ENV_FILENAME = ".env"


def apply_environment(
    context: CLIContext,
    environment: Optional[str],
    database: Optional[str] = None,
    *,
    rebuild: bool = False,
) -> None:
    config = load_config_or_exit(context)
    try:
        resolution = resolve(config.service, environment, database)
    except EnvironmentResolutionError as exc:
        fail(str(exc))

    target = context.project_dir / ENV_FILENAME
    try:
        missing = write_env_file(target, resolution, context.value_mapping)
    except OSError as exc:
        fail(f"Unable to write {target}: {exc}")
    for raw_name in missing:
        context.logger.warning("No value for %s; wrote an empty entry.", raw_name)

    try:
        context.status_store.record_environment(
            config.service, resolution.service_environment, resolution.database_label
        )
    except StatusError as exc:
        fail(str(exc))

    summary = resolution.service_environment
    if resolution.database_label:
        summary = f"{summary} (database: {resolution.database_label})"
    typer.echo(f"Wrote {len(resolution.variable_names)} variables to {target} for {config.service} [{summary}].")

    if rebuild:
        ensure_binary("docker", DOCKER_HINT)
        result = run_compose(context, ["up", "-d", "--build"], config=config)
        if result.returncode != 0:
            fail(f"docker compose exited with status {result.returncode} while rebuilding.")
        typer.echo("Containers rebuilt successfully.")


def rebuild_with_env(context: CLIContext, env_name: str) -> None:
    env_path = context.project_dir / f"{ENV_FILENAME}.{env_name}"
    if not env_path.exists():
        fail(f"{env_path.name} file not found.")
    config = load_config_or_exit(context)
    ensure_binary("docker", DOCKER_HINT)

    typer.echo(f"Rebuilding containers with {env_path.name}...")
    result = run_compose(context, ["up", "-d", "--build"], config=config, env_file=env_path)
    if result.returncode != 0:
        fail(f"docker compose exited with status {result.returncode} while rebuilding.")
    typer.echo("Containers rebuilt successfully.")


def register(app: typer.Typer) -> None:
    @app.command("env")
    def env(
        ctx: typer.Context,
        environment: str = typer.Argument(..., help="Service environment, e.g. testing or connected."),
        database: Optional[str] = typer.Argument(None, help="Database environment; 'remote' for a hosted database."),
        rebuild: bool = typer.Option(False, "--rebuild", help="Run docker compose up --build afterwards."),
    ) -> None:
        """Generate the project's .env file for the given environment."""
        apply_environment(context_from(ctx), environment, database, rebuild=rebuild)

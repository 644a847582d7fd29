from __future__ import annotations

from typing import Optional

import typer

from .commands import env as env_cmd
from .commands import link as link_cmd
from .commands import register as register_commands
from .context import CLIContext
from .envfile import EnvFileError
from .util import fail

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
app = typer.Typer(
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
    help="nucli – link local projects to their docker compose services.",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    link: bool = typer.Option(False, "--link", "-l", help="Link this service to the CLI."),
    env_name: Optional[str] = typer.Option(
        None, "--env", help="Rebuild the service using an alternative .env.<name> file."
    ),
    project_dir: Optional[str] = typer.Option(None, "--project-dir", help="Override the project directory."),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (default: INFO)."),
) -> None:
    if ctx.obj is None:
        try:
            ctx.obj = CLIContext.from_environ(project_dir=project_dir, log_level=log_level)
        except EnvFileError as exc:
            fail(str(exc))
    if link:
        link_cmd.link_service(ctx.obj)
    if env_name:
        env_cmd.rebuild_with_env(ctx.obj, env_name)
    if ctx.invoked_subcommand is None and not (link or env_name):
        typer.echo(ctx.get_help())


register_commands(app)


def run() -> None:
    app(prog_name="nucli")


if __name__ == "__main__":
    run()

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from ..config import ConfigError
from ..status import StatusError, render_status
from ..util import context_from, fail


def register(app: typer.Typer) -> None:
    @app.command("status")
    def status(ctx: typer.Context) -> None:
        """Show link state and environment of every service."""
        context = context_from(ctx)

        current: Optional[str] = None
        try:
            current = context.load_config().service
        except ConfigError as exc:
            context.logger.debug("No current project: %s", exc)

        try:
            entries = context.status_store.entries()
        except StatusError as exc:
            fail(str(exc))
        render_status(entries, Console(), current=current)

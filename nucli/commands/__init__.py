from __future__ import annotations

import typer

from . import env, link, status

__all__ = ["register"]


def register(app: typer.Typer) -> None:
    """
    Register all Typer commands on the provided application instance.
    """

    link.register(app)
    env.register(app)
    status.register(app)

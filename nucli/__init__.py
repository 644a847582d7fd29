"""
Typer-based helper that links local projects to their docker compose services.

The package exposes the :class:`CLIContext` utility shared by all commands and
the :func:`resolve` entry point that computes a service's environment
variables.
"""

from .context import CLIContext
from .resolver import EnvironmentResolver, Resolution, resolve

__all__ = ["CLIContext", "EnvironmentResolver", "Resolution", "resolve"]

__version__ = "0.1.0"

"""
Project configuration helpers.

A linkable project carries a ``nucli.config.json`` file at its root naming the
service it provides::

    {"service": "backend", "name": "api", "composeFile": "docker-compose.yml"}

Only ``service`` is required. Whether the service is one we know about is left
to the resolver.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

CONFIG_FILENAME = "nucli.config.json"


class ConfigError(RuntimeError):
    """Raised when the project configuration cannot be used."""


class ConfigNotFoundError(ConfigError):
    def __init__(self, path: Path) -> None:
        super().__init__(
            f"{CONFIG_FILENAME} not found at {path}. Please make sure you're in the correct directory."
        )
        self.path = path


@dataclass(frozen=True)
class ProjectConfig:
    path: Path
    service: str
    name: str
    compose_file: Optional[str] = None

    @property
    def project_dir(self) -> Path:
        return self.path.parent


def config_path(project_dir: Path) -> Path:
    return project_dir / CONFIG_FILENAME


def _optional_str(payload: Dict[str, Any], key: str, path: Path) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{key}' in {path} must be a non-empty string.")
    return value.strip()


def load_project_config(project_dir: Path) -> ProjectConfig:
    path = config_path(project_dir)
    if not path.exists():
        raise ConfigNotFoundError(path)

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError(f"{path} must contain a JSON object.")

    service = _optional_str(payload, "service", path)
    if service is None:
        raise ConfigError(f"{path} is missing the required 'service' key.")

    return ProjectConfig(
        path=path,
        service=service,
        name=_optional_str(payload, "name", path) or project_dir.name,
        compose_file=_optional_str(payload, "composeFile", path),
    )

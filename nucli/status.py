"""
Persisted link/environment status for each service.

The record lives in a small JSON document::

    {
      "services": {
        "backend": {
          "linked": true,
          "project": "/home/me/src/api",
          "environment": "connected",
          "database": "local",
          "updated": "2024-05-01T12:00:00+00:00"
        }
      }
    }

Writes go through a sibling temp file so an interrupted write never leaves a
truncated record behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.table import Table

from .resolver import SERVICE_ORDER


class StatusError(RuntimeError):
    """Raised when the status file cannot be read or written."""


@dataclass(frozen=True)
class ServiceStatus:
    service: str
    linked: bool = False
    project: Optional[str] = None
    environment: Optional[str] = None
    database: Optional[str] = None
    updated: Optional[str] = None

    @classmethod
    def from_dict(cls, service: str, payload: Dict[str, Any]) -> "ServiceStatus":
        return cls(
            service=service,
            linked=bool(payload.get("linked", False)),
            project=payload.get("project"),
            environment=payload.get("environment"),
            database=payload.get("database"),
            updated=payload.get("updated"),
        )


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class StatusStore:
    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {"services": {}}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise StatusError(f"Status file {self.path} is corrupt: {exc}") from exc
        except OSError as exc:
            raise StatusError(f"Unable to read status file {self.path}: {exc}") from exc
        if not isinstance(payload, dict) or not isinstance(payload.get("services", {}), dict):
            raise StatusError(f"Status file {self.path} has an unexpected layout.")
        services = payload.setdefault("services", {})
        for name, entry in services.items():
            if not isinstance(entry, dict):
                raise StatusError(f"Status file {self.path} has a malformed entry for '{name}'.")
        return payload

    def save(self, payload: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            handle = tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", prefix=".status-", suffix=".json",
                dir=str(self.path.parent), delete=False,
            )
            try:
                with handle:
                    json.dump(payload, handle, indent=2, sort_keys=True)
                    handle.write("\n")
                os.replace(handle.name, self.path)
            except OSError:
                Path(handle.name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StatusError(f"Unable to write status file {self.path}: {exc}") from exc

    def get(self, service: str) -> ServiceStatus:
        services = self.load()["services"]
        return ServiceStatus.from_dict(service, services.get(service, {}))

    def _update(self, service: str, **changes: Any) -> ServiceStatus:
        payload = self.load()
        current = payload["services"].get(service, {})
        current.update(changes)
        current["updated"] = _now()
        payload["services"][service] = current
        self.save(payload)
        return ServiceStatus.from_dict(service, current)

    def mark_linked(self, service: str, project_dir: Path) -> ServiceStatus:
        return self._update(service, linked=True, project=str(project_dir))

    def mark_unlinked(self, service: str) -> ServiceStatus:
        return self._update(service, linked=False)

    def record_environment(self, service: str, environment: str, database: Optional[str]) -> ServiceStatus:
        return self._update(service, environment=environment, database=database)

    def entries(self) -> List[ServiceStatus]:
        """Known services first in canonical order, then anything else alphabetically."""
        services = self.load()["services"]
        names = list(SERVICE_ORDER) + sorted(name for name in services if name not in SERVICE_ORDER)
        return [ServiceStatus.from_dict(name, services.get(name, {})) for name in names]


def build_status_table(entries: List[ServiceStatus], current: Optional[str] = None) -> Table:
    table = Table(title="Linked Services", title_style="bold magenta", header_style="bold blue")
    table.add_column("Service", style="cyan", min_width=10, no_wrap=True)
    table.add_column("Linked", justify="center", no_wrap=True)
    table.add_column("Environment", justify="center", no_wrap=True)
    table.add_column("Database", justify="center", no_wrap=True)
    table.add_column("Project", overflow="fold")

    for entry in entries:
        name = entry.service
        if entry.service == current:
            name = f"[bold]{name}[/bold] *"
        linked = "[bold green]linked[/bold green]" if entry.linked else "[dim]unlinked[/dim]"
        table.add_row(
            name,
            linked,
            entry.environment or "-",
            entry.database or "-",
            entry.project or "-",
        )
    return table


def render_status(entries: List[ServiceStatus], console: Console, current: Optional[str] = None) -> None:
    console.print(build_status_table(entries, current=current))

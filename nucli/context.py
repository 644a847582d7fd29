from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, Optional

from .config import ProjectConfig, load_project_config
from .envfile import parse_env_file
from .status import StatusStore

LOG_NAME = "nucli"
DEFAULT_HOME = "~/.nucli"
DEFAULTS_FILENAME = "defaults.env"
STATUS_FILENAME = "status.json"


def _ensure_logger(level: str) -> logging.Logger:
    logger = logging.getLogger(LOG_NAME)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        logger.warning("Unknown log level '%s'; defaulting to INFO.", level)
    logger.setLevel(numeric_level)
    return logger


def _resolve_project_dir(project_dir: Optional[str]) -> Path:
    if project_dir:
        return Path(project_dir).expanduser().resolve()
    return Path.cwd().resolve()


def _resolve_home(environ: Mapping[str, str]) -> Path:
    return Path(environ.get("NUCLI_HOME") or DEFAULT_HOME).expanduser()


def _resolve_path_override(
    environ: Mapping[str, str], key: str, project_dir: Path, default: Path
) -> Path:
    override = environ.get(key)
    if not override:
        return default
    candidate = Path(override).expanduser()
    if not candidate.is_absolute():
        candidate = project_dir / candidate
    return candidate


def _merge_values(defaults_file: Path, environ: Mapping[str, str]) -> Dict[str, str]:
    merged: Dict[str, str] = dict(parse_env_file(defaults_file))
    merged.update(environ)
    return merged


@dataclass
class CLIContext:
    """
    Runtime context shared by all nucli commands.

    Locates the project directory, the defaults file that feeds variable values,
    and the status file, and exposes the merged process environment.
    """

    project_dir: Path
    home_dir: Path
    defaults_file: Path
    status_file: Path
    env_mapping: Dict[str, str] = field(default_factory=dict)
    value_mapping: Dict[str, str] = field(default_factory=dict)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(LOG_NAME))

    @classmethod
    def from_environ(
        cls,
        *,
        project_dir: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        log_level: str = "INFO",
    ) -> "CLIContext":
        env = dict(os.environ if environ is None else environ)
        logger = _ensure_logger(log_level)

        resolved_project = _resolve_project_dir(project_dir)
        home = _resolve_home(env)
        defaults_file = _resolve_path_override(
            env, "NUCLI_DEFAULTS_FILE", resolved_project, home / DEFAULTS_FILENAME
        )
        status_file = _resolve_path_override(
            env, "NUCLI_STATUS_FILE", resolved_project, home / STATUS_FILENAME
        )
        if not defaults_file.exists():
            logger.debug("No defaults file at %s; using the process environment only.", defaults_file)

        return cls(
            project_dir=resolved_project,
            home_dir=home,
            defaults_file=defaults_file,
            status_file=status_file,
            env_mapping=env,
            value_mapping=_merge_values(defaults_file, env),
            logger=logger,
        )

    @property
    def environment(self) -> Dict[str, str]:
        return dict(self.env_mapping)

    @property
    def status_store(self) -> StatusStore:
        return StatusStore(self.status_file)

    def load_config(self) -> ProjectConfig:
        return load_project_config(self.project_dir)

    def env_value(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.value_mapping.get(key, default)

    def compose_file(self, config: Optional[ProjectConfig] = None) -> Optional[Path]:
        if config is None or not config.compose_file:
            return None
        return (self.project_dir / config.compose_file).resolve()

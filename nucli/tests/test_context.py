from __future__ import annotations

from pathlib import Path

import pytest

from nucli.context import CLIContext


pytestmark = pytest.mark.unit


def test_defaults_file_feeds_values(nucli_home: Path, backend_project: Path) -> None:
    context = CLIContext.from_environ(project_dir=str(backend_project))

    assert context.project_dir == backend_project.resolve()
    assert context.defaults_file == nucli_home / "defaults.env"
    assert context.status_file == nucli_home / "status.json"
    assert context.env_value("BE_TS_SERVER_PORT") == "3000"
    assert context.env_value("MISSING", "fallback") == "fallback"


def test_process_environment_wins_over_defaults(
    nucli_home: Path, backend_project: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("BE_TS_SERVER_PORT", "4000")

    context = CLIContext.from_environ(project_dir=str(backend_project))

    assert context.env_value("BE_TS_SERVER_PORT") == "4000"


def test_explicit_environ_and_relative_overrides(tmp_path: Path, backend_project: Path) -> None:
    (backend_project / "local.env").write_text("FE_SS_API_URL=http://localhost\n")
    environ = {
        "NUCLI_HOME": str(tmp_path / "home"),
        "NUCLI_DEFAULTS_FILE": "local.env",
        "NUCLI_STATUS_FILE": str(tmp_path / "elsewhere" / "status.json"),
    }

    context = CLIContext.from_environ(project_dir=str(backend_project), environ=environ)

    assert context.defaults_file == backend_project.resolve() / "local.env"
    assert context.status_file == tmp_path / "elsewhere" / "status.json"
    assert context.env_value("FE_SS_API_URL") == "http://localhost"
    assert context.environment == environ


def test_missing_defaults_file_is_not_an_error(tmp_path: Path) -> None:
    context = CLIContext.from_environ(project_dir=str(tmp_path), environ={"NUCLI_HOME": str(tmp_path / "none")})

    assert context.env_value("BE_TS_SERVER_PORT") is None


def test_unknown_log_level_falls_back_to_info(tmp_path: Path) -> None:
    context = CLIContext.from_environ(project_dir=str(tmp_path), environ={}, log_level="chatty")

    assert context.logger.level == 20


def test_compose_file_from_config(backend_project: Path) -> None:
    context = CLIContext.from_environ(project_dir=str(backend_project), environ={})
    config = context.load_config()

    assert context.compose_file(config) is None
    assert context.compose_file() is None


def test_named_log_level_is_applied(tmp_path: Path) -> None:
    context = CLIContext.from_environ(project_dir=str(tmp_path), environ={}, log_level="warning")

    assert context.logger.level == 30

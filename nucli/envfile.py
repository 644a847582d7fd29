from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Mapping, Tuple

from .resolver import Resolution


class EnvFileError(RuntimeError):
    """Raised when an env file exists but cannot be read."""


def parse_env_file(path: Path) -> Iterable[Tuple[str, str]]:
    if not path.exists():
        return []
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise EnvFileError(f"Unable to read env file {path}: {exc}") from exc
    return _iter_pairs(text.splitlines())


def _iter_pairs(lines: Iterable[str]) -> Iterable[Tuple[str, str]]:
    for raw in lines:
        if not raw or raw.lstrip().startswith("#") or "=" not in raw:
            continue
        key, value = raw.split("=", 1)
        yield key.strip(), value


def render_env_lines(resolution: Resolution, values: Mapping[str, str]) -> Tuple[List[str], List[str]]:
    """
    Pair each output name with the value of its raw name.

    Returns the ``NAME=value`` lines and the raw names that had no value.
    Missing values are rendered empty.
    """

    lines: List[str] = []
    missing: List[str] = []
    for raw_name, name in resolution.pairs():
        value = values.get(raw_name)
        if value is None:
            missing.append(raw_name)
            value = ""
        lines.append(f"{name}={value}")
    return lines, missing


def write_env_file(path: Path, resolution: Resolution, values: Mapping[str, str]) -> List[str]:
    lines, missing = render_env_lines(resolution, values)
    handle = tempfile.NamedTemporaryFile(
        prefix=".nucli-env-", suffix=".tmp", dir=str(path.parent), delete=False
    )
    try:
        with handle:
            handle.write("\n".join(lines).encode("utf-8"))
            if lines:
                handle.write(b"\n")
        os.replace(handle.name, path)
    except OSError:
        Path(handle.name).unlink(missing_ok=True)
        raise
    return missing

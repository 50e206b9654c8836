"""
Project metadata used by the log formatters (service name and version).

The installed distribution metadata is preferred; in a source checkout the
nearest pyproject.toml is read instead.
"""

from pathlib import Path
from importlib import metadata as importlib_metadata
from typing import Any
import tomllib

DISTRIBUTION_NAME = "social-core"


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    p = start
    for _ in range(max_up):
        candidate = p / "pyproject.toml"
        if candidate.exists():
            return candidate
        if p.parent == p:
            break
        p = p.parent
    return None


def load_pyproject_data(pyproject_path: Path) -> dict:
    with pyproject_path.open("rb") as f:
        return tomllib.load(f)


def get_pyproject_value(
    key: str,
    start: str | Path | None = None,
    max_up: int = 5,
    default: Any = None,
) -> Any:
    """
    Return the value for a dot-separated `key` ("project.version") from the
    nearest pyproject.toml above `start` (defaults to this module's folder).

    Returns `default` when the file is missing, unreadable, or lacks the key.
    """
    start_path = Path(start).resolve() if start is not None else Path(__file__).resolve().parent

    pyproject = find_pyproject(start=start_path, max_up=max_up)
    if not pyproject or not key:
        return default

    try:
        data = load_pyproject_data(pyproject)
    except (OSError, tomllib.TOMLDecodeError):
        return default

    cur = data
    for part in key.split("."):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        else:
            return default
    return cur


def get_project_name(
    start: Path | str | None = None,
    max_up: int = 5,
    default: str = DISTRIBUTION_NAME,
) -> str:
    return get_pyproject_value("project.name", start=start, max_up=max_up, default=default)


def get_project_version(
    start: Path | str | None = None,
    max_up: int = 5,
    default: str = "unknown",
) -> str:
    """
    Installed distribution version if available, else project.version from
    pyproject.toml, else `default`.
    """
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        pass

    value = get_pyproject_value("project.version", start=start, max_up=max_up, default=None)
    return value if value is not None else default


__all__ = [
    "find_pyproject",
    "load_pyproject_data",
    "get_pyproject_value",
    "get_project_name",
    "get_project_version",
]

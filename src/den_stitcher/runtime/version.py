"""Report the project version for ``--version``."""

from __future__ import annotations

from importlib import metadata as importlib_metadata
from pathlib import Path

import tomlkit
from tomlkit.exceptions import ParseError

from den_stitcher.logging_utils import logger

DISTRIBUTION_NAMES = ("den-stitcher", "den_stitcher")
UNKNOWN_VERSION = "0.0.0"


def _installed_version() -> str | None:
    for name in DISTRIBUTION_NAMES:
        try:
            return importlib_metadata.version(name)
        except importlib_metadata.PackageNotFoundError:
            continue
    return None


def _nearest_pyproject(start: Path) -> Path | None:
    for parent in start.resolve().parents:
        candidate = parent / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _pyproject_version(pyproject: Path) -> str | None:
    try:
        doc = tomlkit.parse(pyproject.read_text(encoding="utf-8"))
    except (OSError, ParseError) as exc:
        logger.warning("Error reading %s: %s", pyproject, exc)
        return None
    version = doc.get("project", {}).get("version")
    if isinstance(version, str) and version.strip():
        return str(version).strip()
    return None


def resolve_project_version() -> str:
    """
    Return the installed version, else the source tree's, else 0.0.0.

    Running from a checkout reads ``project.version`` from the nearest
    pyproject.toml above this file.
    """
    version = _installed_version()
    if version is not None:
        return version
    pyproject = _nearest_pyproject(Path(__file__))
    if pyproject is not None:
        version = _pyproject_version(pyproject)
    return version or UNKNOWN_VERSION

"""Persisted user preferences stored as a small TOML document."""

from __future__ import annotations

from pathlib import Path

import tomlkit
from tomlkit.exceptions import ParseError

from den_stitcher.logging_utils import logger


class PreferenceStore:
    """
    Read and write string preferences in a TOML file.

    Missing files and missing keys fall back to the caller's default.
    Writes keep any other keys already present in the file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> tomlkit.TOMLDocument:
        if not self.path.is_file():
            return tomlkit.document()
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return tomlkit.load(f)
        except (OSError, ParseError) as exc:
            logger.warning("Ignoring unreadable preferences %s: %s",
                           self.path, exc)
            return tomlkit.document()

    def read(self, key: str, default: str) -> str:
        """Return the stored value for key, or default."""
        value = self._load().get(key)
        if value is None:
            return default
        return str(value)

    def persist(self, key: str, value: str) -> None:
        """Store value under key, creating the file if needed."""
        doc = self._load()
        doc[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            tomlkit.dump(doc, f)
        logger.debug("Saved preference %s=%s to %s", key, value, self.path)

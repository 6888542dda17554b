"""Choose and prepare the directory artifacts are written to."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from den_stitcher.errors import OutputDirectoryError
from den_stitcher.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable

FALLBACK_OUTPUT_DIR = "den_stitcher_output"


def setup_output_directory(
    output_path: str,
    path_factory: Callable[[str], Path] = Path,
) -> Path:
    """
    Return a directory the artifact can be written to.

    The configured directory is created if needed. When that fails,
    ``den_stitcher_output`` in the working directory is tried instead so
    a finished harvest is not thrown away.

    Raises:
        OutputDirectoryError: Neither directory could be created.

    """
    for candidate in (output_path, FALLBACK_OUTPUT_DIR):
        path = path_factory(candidate)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("Cannot create output directory %s: %s", path, exc)
            continue
        if candidate != output_path:
            logger.info("Using fallback directory: %s", path)
        return path
    raise OutputDirectoryError(output_path, FALLBACK_OUTPUT_DIR)

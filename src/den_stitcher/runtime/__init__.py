"""Runtime utilities for output and version helpers."""

from .output import setup_output_directory
from .version import resolve_project_version

__all__ = [
    "resolve_project_version",
    "setup_output_directory",
]

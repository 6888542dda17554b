"""
Defines shared type aliases for the stitcher.

Centralizes reusable type hints to improve consistency and readability.
"""
from __future__ import annotations

from typing import Literal

LayoutMode = Literal["tight", "square"]
FitMode = Literal["contain", "cover"]
SourceScope = Literal["single", "dual"]
SourceDescriptor = str
RGB = tuple[int, int, int]

LAYOUT_MODES: tuple[LayoutMode, ...] = ("tight", "square")
SOURCE_SCOPES: tuple[SourceScope, ...] = ("single", "dual")

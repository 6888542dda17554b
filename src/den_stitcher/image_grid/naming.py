"""Artifact naming, encoding and persistence for composed grids."""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from den_stitcher.constants import (
    LAYOUT_LABELS,
    PNG_FORMAT,
    PNG_MIME_TYPE,
    SCOPE_LABELS,
)
from den_stitcher.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from PIL import Image

    from den_stitcher.type_defs import LayoutMode, SourceScope


@dataclass(frozen=True)
class CompositionResult:
    """Encoded grid ready to be written out."""

    data: bytes
    mime_type: str
    filename: str


def artifact_filename(scope: SourceScope, mode: LayoutMode) -> str:
    """Build the deterministic filename for a harvest artifact."""
    try:
        return f"{SCOPE_LABELS[scope]}-{LAYOUT_LABELS[mode]}.png"
    except KeyError as exc:
        msg = f"Unknown scope or layout: {scope!r}, {mode!r}"
        raise ValueError(msg) from exc


def export_canvas(
    canvas: Image.Image,
    *,
    scope: SourceScope,
    mode: LayoutMode,
) -> CompositionResult:
    """Encode canvas to PNG bytes and attach its artifact name."""
    filename = artifact_filename(scope, mode)
    buf = io.BytesIO()
    canvas.save(buf, format=PNG_FORMAT)
    return CompositionResult(
        data=buf.getvalue(),
        mime_type=PNG_MIME_TYPE,
        filename=filename,
    )


def save_artifact(result: CompositionResult, out_dir: Path) -> Path:
    """Write result into out_dir and return the written path."""
    if not isinstance(out_dir, Path):
        msg = "out_dir must be a pathlib.Path"
        raise TypeError(msg)

    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / result.filename
    out_path.write_bytes(result.data)
    logger.info("Stitched image saved to: %s", out_path)
    return out_path

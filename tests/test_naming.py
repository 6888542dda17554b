"""Tests for artifact naming and export."""
from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image

from den_stitcher.image_grid import naming


@pytest.mark.parametrize(
    ("scope", "mode", "expected"),
    [
        ("single", "tight", "single-tight-grid.png"),
        ("single", "square", "single-perfect-square.png"),
        ("dual", "tight", "dual-tight-grid.png"),
        ("dual", "square", "dual-perfect-square.png"),
    ],
)
def test_artifact_filename(scope: str, mode: str, expected: str) -> None:
    assert naming.artifact_filename(scope, mode) == expected  # type: ignore[arg-type]


def test_artifact_filename_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown scope"):
        naming.artifact_filename("triple", "tight")  # type: ignore[arg-type]


def test_export_canvas_encodes_png(sample_image: Image.Image) -> None:
    result = naming.export_canvas(sample_image, scope="dual", mode="square")
    assert result.mime_type == "image/png"
    assert result.filename == "dual-perfect-square.png"
    assert result.data.startswith(b"\x89PNG")
    with Image.open(io.BytesIO(result.data)) as decoded:
        assert decoded.size == sample_image.size


def test_save_artifact_writes_file(tmp_path: Path) -> None:
    result = naming.CompositionResult(
        data=b"payload", mime_type="image/png", filename="dual-tight-grid.png",
    )
    out = naming.save_artifact(result, tmp_path / "nested" / "out")
    assert out == tmp_path / "nested" / "out" / "dual-tight-grid.png"
    assert out.read_bytes() == b"payload"


def test_save_artifact_requires_path(tmp_path: Path) -> None:
    result = naming.CompositionResult(b"", "image/png", "x.png")
    with pytest.raises(TypeError, match="pathlib.Path"):
        naming.save_artifact(result, str(tmp_path))  # type: ignore[arg-type]

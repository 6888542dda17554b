"""Tests for runtime.output helpers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path, Path as RealPath
from typing import cast

import pytest

from den_stitcher.errors import OutputDirectoryError
from den_stitcher.runtime import output as runtime_output


def test_setup_output_directory_creates_path(tmp_path: Path) -> None:
    target = tmp_path / "new" / "dir"
    result = runtime_output.setup_output_directory(str(target))
    assert result == target
    assert target.is_dir()


def test_setup_output_directory_fallback(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    class FailingPath(RealPath):
        def mkdir(  # type: ignore[override]
            self,
            mode: int = 0o777,
            parents: bool = False,  # noqa: FBT001, FBT002
            exist_ok: bool = False,  # noqa: FBT001, FBT002
        ) -> None:
            if "restricted" in str(self):
                raise PermissionError("Mock failure")
            return super().mkdir(mode=mode, parents=parents, exist_ok=exist_ok)

    monkeypatch.chdir(tmp_path)
    with caplog.at_level(logging.INFO):
        result = runtime_output.setup_output_directory(
            "restricted",
            path_factory=cast(Callable[[str], Path], FailingPath),
        )
    assert result.name == runtime_output.FALLBACK_OUTPUT_DIR
    assert (tmp_path / runtime_output.FALLBACK_OUTPUT_DIR).is_dir()
    assert "Cannot create output directory" in caplog.text
    assert "Using fallback directory" in caplog.text


def test_setup_output_directory_gives_up(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    class ReadOnlyPath(RealPath):
        def mkdir(  # type: ignore[override]
            self,
            mode: int = 0o777,
            parents: bool = False,  # noqa: FBT001, FBT002
            exist_ok: bool = False,  # noqa: FBT001, FBT002
        ) -> None:
            raise PermissionError("read-only")

    monkeypatch.chdir(tmp_path)
    with pytest.raises(OutputDirectoryError) as exc_info:
        runtime_output.setup_output_directory(
            "restricted",
            path_factory=cast(Callable[[str], Path], ReadOnlyPath),
        )
    assert exc_info.value.requested == "restricted"

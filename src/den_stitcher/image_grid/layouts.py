"""Grid planning and composition for harvested images."""

from __future__ import annotations

import math
from contextlib import ExitStack
from dataclasses import dataclass
from typing import TYPE_CHECKING

from den_stitcher.config_defaults import DEFAULT_PADDING
from den_stitcher.constants import COLOR_WHITE
from den_stitcher.errors import EmptyInputError
from den_stitcher.image_grid.core import Rect, draw_fit, make_canvas
from den_stitcher.logging_utils import logger
from den_stitcher.type_defs import LAYOUT_MODES

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

    from PIL import Image

    from den_stitcher.image_io import LoadedImage
    from den_stitcher.type_defs import RGB, FitMode, LayoutMode


@dataclass(frozen=True)
class LayoutPlan:
    """Geometry of a padded grid of square tiles."""

    mode: LayoutMode
    columns: int
    rows: int
    tile_size: int
    padding: int
    canvas_width: int
    canvas_height: int

    @property
    def cells(self) -> int:
        """Number of grid positions."""
        return self.columns * self.rows

    @property
    def canvas_size(self) -> tuple[int, int]:
        """Return (canvas_width, canvas_height)."""
        return self.canvas_width, self.canvas_height


def _ceil_sqrt(n: int) -> int:
    root = math.isqrt(n)
    return root if root * root == n else root + 1


def grid_dimensions(n: int, mode: LayoutMode) -> tuple[int, int]:
    """
    Return (columns, rows) for n images.

    ``tight`` fills row-major and drops trailing empty rows.
    ``square`` always returns an N x N grid.
    """
    if n <= 0:
        msg = "Cannot lay out zero images"
        raise EmptyInputError(msg)
    if mode not in LAYOUT_MODES:
        msg = f"Unknown layout mode: {mode!r}"
        raise ValueError(msg)
    columns = _ceil_sqrt(n)
    if mode == "square":
        return columns, columns
    return columns, -(-n // columns)


def plan_layout(
    sizes: Sequence[tuple[int, int]],
    mode: LayoutMode,
    *,
    padding: int = DEFAULT_PADDING,
) -> LayoutPlan:
    """
    Compute grid geometry for images of the given sizes.

    The tile is square and large enough to hold the largest edge of any
    image, so every image fits its cell without cropping.
    """
    columns, rows = grid_dimensions(len(sizes), mode)
    if padding < 0:
        msg = "padding must not be negative"
        raise ValueError(msg)
    tile = max(max(w, h) for w, h in sizes)
    return LayoutPlan(
        mode=mode,
        columns=columns,
        rows=rows,
        tile_size=tile,
        padding=padding,
        canvas_width=columns * tile + (columns + 1) * padding,
        canvas_height=rows * tile + (rows + 1) * padding,
    )


def cell_rect(index: int, plan: LayoutPlan) -> Rect:
    """Return the cell occupied by the image at index (row-major)."""
    row, col = divmod(index, plan.columns)
    step = plan.tile_size + plan.padding
    return Rect.square(
        plan.padding + col * step,
        plan.padding + row * step,
        plan.tile_size,
    )


def compose_grid(
    images: Sequence[LoadedImage],
    plan: LayoutPlan,
    *,
    fit_mode: FitMode = "contain",
    bg_color: RGB = COLOR_WHITE,
) -> Image.Image:
    """
    Draw images into their cells on a fresh canvas.

    Every image is closed once the pass ends, whether or not each draw
    succeeded. A failing draw still propagates to the caller.
    """
    if len(images) > plan.cells:
        msg = f"{len(images)} images do not fit {plan.cells} cells"
        raise ValueError(msg)

    with ExitStack() as stack:
        for loaded in images:
            stack.callback(loaded.close)

        canvas = make_canvas(plan.canvas_size, bg_color)
        for idx, loaded in enumerate(images):
            draw_fit(
                canvas,
                loaded.image,
                cell_rect(idx, plan),
                fit_mode=fit_mode,
                bg_color=bg_color,
            )

    logger.info(
        "Composed %d images into %dx%d grid (%dx%d px)",
        len(images), plan.columns, plan.rows,
        plan.canvas_width, plan.canvas_height,
    )
    return canvas

"""Core rendering primitives for placing images into grid cells."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from PIL import Image, ImageOps

from den_stitcher.constants import COLOR_MODE_RGB

if TYPE_CHECKING:  # pragma: no cover
    from den_stitcher.type_defs import RGB, FitMode


def to_rgb(img: Image.Image, *, bg_color: RGB) -> Image.Image:
    """Convert PIL image to RGB, alpha compositing if needed."""
    if img.mode == COLOR_MODE_RGB:
        return img
    if img.mode in ("RGBA", "LA") or (
        img.mode == "P" and "transparency" in img.info
    ):
        bg = Image.new("RGBA", img.size, (*bg_color, 255))
        comp = Image.alpha_composite(bg, img.convert("RGBA"))
        return comp.convert(COLOR_MODE_RGB)
    return img.convert(COLOR_MODE_RGB)


@dataclass(frozen=True)
class Rect:
    """Simple rectangle with convenience accessors."""

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def w(self) -> int:
        """Width."""
        return self.x1 - self.x0

    @property
    def h(self) -> int:
        """Height."""
        return self.y1 - self.y0

    def size(self) -> tuple[int, int]:
        """Return (w, h)."""
        return self.w, self.h

    @classmethod
    def square(cls, x: int, y: int, side: int) -> Rect:
        """Return a side x side square with top left at (x, y)."""
        return cls(x, y, x + side, y + side)


def fit_rect(
    size: tuple[int, int],
    cell: Rect,
    fit_mode: FitMode = "contain",
) -> Rect:
    """
    Return where an image of ``size`` lands when fitted into ``cell``.

    fit_mode:
        - "contain": scale to fit inside the cell, centered, no cropping
        - "cover": scale to fill the cell, centered; the result may
          extend past the cell and is cropped when drawn
    """
    iw, ih = size
    if iw <= 0 or ih <= 0:
        msg = f"Image size must be positive, got {iw}x{ih}"
        raise ValueError(msg)
    if fit_mode == "cover":
        scale = max(cell.w / iw, cell.h / ih)
    else:
        scale = min(cell.w / iw, cell.h / ih)
    dw = max(1, round(iw * scale))
    dh = max(1, round(ih * scale))
    dx = cell.x0 + round((cell.w - dw) / 2)
    dy = cell.y0 + round((cell.h - dh) / 2)
    return Rect(dx, dy, dx + dw, dy + dh)


def draw_fit(
    canvas: Image.Image,
    img: Image.Image,
    cell: Rect,
    *,
    fit_mode: FitMode = "contain",
    bg_color: RGB,
) -> Rect:
    """Draw img into cell on canvas and return the occupied rectangle."""
    rgb = to_rgb(img, bg_color=bg_color)
    if fit_mode == "cover":
        # Crop to the cell so neighbours are never painted over.
        fitted = ImageOps.fit(
            rgb,
            cell.size(),
            method=Image.Resampling.LANCZOS,
            centering=(0.5, 0.5),
        )
        canvas.paste(fitted, (cell.x0, cell.y0))
        return cell

    target = fit_rect(rgb.size, cell, "contain")
    if target.size() == rgb.size:
        resized = rgb
    else:
        resized = rgb.resize(target.size(), Image.Resampling.LANCZOS)
    canvas.paste(resized, (target.x0, target.y0))
    return target


def make_canvas(size: tuple[int, int], color: RGB) -> Image.Image:
    """Return a blank RGB canvas filled with color."""
    w, h = size
    if w <= 0 or h <= 0:
        msg = "canvas size must be positive"
        raise ValueError(msg)
    return Image.new(COLOR_MODE_RGB, (w, h), color)

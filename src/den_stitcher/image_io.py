"""Image fetching, decoding and ordered concurrent loading."""
from __future__ import annotations

import asyncio
import io
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

from den_stitcher.errors import DecodeError, LoadError
from den_stitcher.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Awaitable, Callable, Iterable, Sequence

    from den_stitcher.type_defs import SourceDescriptor

    Fetcher = Callable[[SourceDescriptor], Awaitable[bytes]]


@dataclass(slots=True)
class LoadedImage:
    """A decoded image together with the descriptor it came from."""

    source: SourceDescriptor
    image: Image.Image
    released: bool = field(default=False, init=False, repr=False,
                           compare=False)

    @property
    def width(self) -> int:
        """Natural width in pixels."""
        return self.image.width

    @property
    def height(self) -> int:
        """Natural height in pixels."""
        return self.image.height

    @property
    def size(self) -> tuple[int, int]:
        """Natural (width, height)."""
        return self.image.size

    def close(self) -> None:
        """Release the decoded pixel buffer. Safe to call twice."""
        if self.released:
            return
        self.released = True
        self.image.close()


def decode_image(data: bytes, source: SourceDescriptor) -> LoadedImage:
    """
    Decode raw bytes into a LoadedImage.

    Args:
        data: Encoded image bytes.
        source: Descriptor the bytes were fetched from, for error reports.

    Returns:
        The decoded image with its pixels loaded.

    Raises:
        DecodeError: If the bytes are not a readable raster image, are
            larger than Pillow's ``MAX_IMAGE_PIXELS`` guard allows, or
            decode to an empty image.

    """
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError,
            SyntaxError, ValueError) as e:
        raise DecodeError(source, f"cannot decode image: {e!s}") from e
    if img.width <= 0 or img.height <= 0:
        img.close()
        raise DecodeError(source, "image has no pixels")
    return LoadedImage(source=source, image=img)


async def load_image(
    source: SourceDescriptor,
    fetch: Fetcher,
) -> LoadedImage:
    """Fetch and decode one descriptor."""
    data = await fetch(source)
    return decode_image(data, source)


async def load_images(
    sources: Sequence[SourceDescriptor],
    fetch: Fetcher,
    *,
    concurrency: int,
) -> list[LoadedImage]:
    """
    Load every descriptor, skipping the ones that fail.

    At most ``concurrency`` loads run at once. The result follows the
    order of ``sources`` regardless of which load finishes first. An
    empty input returns immediately without scheduling any work.

    Only ``LoadError`` is skipped. Any other failure, or cancellation,
    closes the images decoded so far before propagating.
    """
    if not sources:
        return []
    if concurrency < 1:
        msg = f"concurrency must be at least 1, got {concurrency}"
        raise ValueError(msg)

    gate = asyncio.Semaphore(concurrency)
    decoded: list[LoadedImage] = []

    async def guarded(src: SourceDescriptor) -> LoadedImage | None:
        async with gate:
            try:
                loaded = await load_image(src, fetch)
            except LoadError as e:
                logger.warning("%s", e)
                return None
        decoded.append(loaded)
        return loaded

    try:
        results = await asyncio.gather(
            *(guarded(src) for src in sources), return_exceptions=True,
        )
    except BaseException:
        _release(decoded)
        raise
    failures = [r for r in results if isinstance(r, BaseException)]
    if failures:
        _release(decoded)
        raise failures[0]

    images = [r for r in results if r is not None]
    logger.info("Loaded %d of %d images", len(images), len(sources))
    return images


def _release(images: Iterable[LoadedImage]) -> None:
    for image in images:
        image.close()

"""
Error taxonomy for a harvest run.

Fatal errors abort the pipeline before an artifact is produced and carry
a single human-readable message. ``LoadError`` and ``RestoreFailure`` are
recovered locally and only logged.
"""

from __future__ import annotations


class StitchError(Exception):
    """Base class for every error raised by the stitcher."""


class NotFoundError(StitchError):
    """No matching images were collected from any source."""


class LoadError(StitchError):
    """A single descriptor could not be fetched or decoded."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load {source}: {reason}")


class FetchError(LoadError):
    """The image bytes could not be retrieved."""

    def __init__(
        self, source: str, reason: str, status: int | None = None,
    ) -> None:
        self.status = status
        super().__init__(source, reason)


class DecodeError(LoadError):
    """The retrieved bytes are not a decodable raster image."""


class AllLoadsFailedError(StitchError):
    """Images were found but none of them could be loaded."""


class EmptyInputError(StitchError, ValueError):
    """A layout was requested for zero images."""


class NavigationTimeoutError(StitchError):
    """A navigation never signalled that the page finished loading."""

    def __init__(self, context_id: str, url: str, timeout_s: float) -> None:
        self.context_id = context_id
        self.url = url
        self.timeout_s = timeout_s
        super().__init__(
            f"Timed out after {timeout_s:g}s waiting for {url} to load",
        )


class TooManyImagesError(StitchError):
    """The merged harvest exceeds the configured image ceiling."""

    def __init__(self, count: int, limit: int) -> None:
        self.count = count
        self.limit = limit
        super().__init__(
            f"Found {count} images across both tabs, more than the "
            f"limit of {limit}. Raise harvest.max_dual_images to stitch them.",
        )


class HarvestInProgressError(StitchError):
    """A harvest is already running against the same browser context."""


class RestoreFailure(StitchError):
    """Returning to the starting page failed. Never raised to callers."""


class NavigationError(StitchError):
    """The browser refused or failed to start a navigation."""


class OutputDirectoryError(StitchError):
    """Neither the configured nor the fallback output directory works."""

    def __init__(self, requested: str, fallback: str) -> None:
        self.requested = requested
        self.fallback = fallback
        super().__init__(
            f"Cannot write to {requested} or the fallback {fallback}",
        )

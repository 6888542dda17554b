"""Browser capabilities the harvest depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from den_stitcher.collector import ImageElement


class PageDriver(Protocol):
    """
    Narrow view of one browser tab.

    ``navigate`` only issues the request. Completion is reported
    separately through a ReadySignalHub under ``context_id``.
    """

    context_id: str

    async def current_url(self) -> str:
        """Return the URL currently shown."""
        ...

    async def navigate(self, url: str) -> None:
        """Start loading url without waiting for it to finish."""
        ...

    async def enumerate_images(self, prefix: str) -> list[ImageElement]:
        """Return the page's images whose alt text starts with prefix."""
        ...

    async def fetch_bytes(self, url: str) -> bytes:
        """Download url with the page's cookies; raise FetchError."""
        ...

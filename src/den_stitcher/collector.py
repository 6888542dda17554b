"""Extract image descriptors from a page model and deduplicate them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable, Mapping, Sequence

    from den_stitcher.type_defs import SourceDescriptor


@dataclass(frozen=True, slots=True)
class ImageElement:
    """One ``<img>`` element as seen by the page."""

    alt: str
    src: str = ""
    current_src: str = ""
    natural_width: int = 0
    natural_height: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ImageElement:
        """Build from the plain dict a page script returns."""
        return cls(
            alt=str(data.get("alt") or ""),
            src=str(data.get("src") or ""),
            current_src=str(data.get("currentSrc") or ""),
            natural_width=int(data.get("naturalWidth") or 0),
            natural_height=int(data.get("naturalHeight") or 0),
        )

    @property
    def best_source(self) -> str:
        """The source the browser actually picked, else the declared one."""
        return self.current_src or self.src

    @property
    def is_rendered(self) -> bool:
        """True once the browser has decoded the element."""
        return self.natural_width > 0 and self.natural_height > 0


def collect_sources(
    elements: Sequence[ImageElement],
    prefix: str,
    *,
    limit: int | None = None,
    require_rendered: bool = False,
) -> list[SourceDescriptor]:
    """
    Return image URLs for elements whose alt text starts with prefix.

    Page order is kept. ``require_rendered`` drops elements the browser
    has not decoded yet, and ``limit`` caps how many matching elements
    are considered. Elements without any source are skipped. An empty
    list is a valid result.
    """
    matched = [el for el in elements if el.alt.startswith(prefix)]
    if require_rendered:
        matched = [el for el in matched if el.is_rendered]
    if limit is not None:
        matched = matched[:limit]
    return [el.best_source for el in matched if el.best_source]


def dedup(items: Iterable[SourceDescriptor]) -> list[SourceDescriptor]:
    """Drop repeated descriptors, keeping the first occurrence order."""
    return list(dict.fromkeys(items))

"""URL predicates and fixed source locations for the harvested site."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import parse_qs, urlencode, urlsplit

if TYPE_CHECKING:  # pragma: no cover
    from den_stitcher.config import SiteConfig


def _origin_of(url: str) -> str | None:
    """Return ``scheme://host[:port]`` for url, or None if unparsable."""
    try:
        parts = urlsplit(url)
        # Accessing .port validates it and raises on garbage.
        _ = parts.port
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return f"{parts.scheme.lower()}://{parts.netloc.lower()}"


@dataclass(frozen=True)
class SiteUrls:
    """
    Structured view of the target site.

    The two harvest sources are the den page and the same page with the
    alternate tab selected (``/den`` and ``/den?tab=hibernate`` by
    default).
    """

    origin: str
    den_path: str
    tab_param: str
    alt_tab: str

    @classmethod
    def from_config(cls, cfg: SiteConfig) -> SiteUrls:
        """Build from the ``[site]`` config section."""
        return cls(
            origin=cfg.origin.rstrip("/").lower(),
            den_path=cfg.den_path,
            tab_param=cfg.tab_param,
            alt_tab=cfg.alt_tab,
        )

    @property
    def primary_url(self) -> str:
        """URL of the first source."""
        return f"{self.origin}{self.den_path}"

    @property
    def alternate_url(self) -> str:
        """URL of the second source."""
        query = urlencode({self.tab_param: self.alt_tab})
        return f"{self.primary_url}?{query}"

    def source_urls(self) -> tuple[str, str]:
        """Return the two harvest sources in visiting order."""
        return self.primary_url, self.alternate_url

    def is_site(self, url: str) -> bool:
        """True when url belongs to the configured origin."""
        return _origin_of(url) == self.origin

    def is_den(self, url: str) -> bool:
        """True when url is the den page, whichever tab is selected."""
        if not self.is_site(url):
            return False
        return urlsplit(url).path == self.den_path

    def is_alternate_tab(self, url: str) -> bool:
        """True when url is the den page with the alternate tab selected."""
        if not self.is_den(url):
            return False
        query = parse_qs(urlsplit(url).query)
        return query.get(self.tab_param, [None])[0] == self.alt_tab

    def other_tab_url(self, url: str) -> str:
        """Return the URL of the den tab not shown by url."""
        if self.is_alternate_tab(url):
            return self.primary_url
        return self.alternate_url

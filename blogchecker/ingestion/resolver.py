"""
Feed URL Resolver
=================

Maps a site descriptor to the URL of its feed.

Known platforms publish their feed at a fixed path derived from the site
path; everything else goes through feed discovery.
"""

from typing import Callable, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from ..models import SiteDescriptor, SiteKind
from ..utils.logging import get_logger_for_component
from .discovery import FeedDiscoverer


def _path_name(path: str) -> str:
    """Site path with every slash removed (``/onk/`` -> ``onk``)."""
    return path.replace("/", "")


FEED_PATH_RULES: Dict[SiteKind, Callable[[str], str]] = {
    SiteKind.HATENABLOG: lambda path: "/feed",
    SiteKind.SPEAKERDECK: lambda path: f"/{_path_name(path)}.atom",
    SiteKind.SCRAPBOX: lambda path: f"/api/feed/{_path_name(path)}",
    SiteKind.SLIDESHARE: lambda path: f"/rss/user/{_path_name(path)}",
}


def replace_path(url: str, path: str) -> str:
    """Return ``url`` with its path replaced; other components are kept."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


class FeedURLResolver:
    """Resolves feed URLs for sites."""

    def __init__(self, discoverer: Optional[FeedDiscoverer] = None):
        """Initialize resolver.

        Args:
            discoverer: Feed discovery used for sites without a fixed rule
                (default: created on first use)
        """
        self._discoverer = discoverer
        self.logger = get_logger_for_component("resolver")

    @property
    def discoverer(self) -> FeedDiscoverer:
        if self._discoverer is None:
            self._discoverer = FeedDiscoverer()
        return self._discoverer

    def resolve(self, site: SiteDescriptor) -> Optional[str]:
        """Determine the feed URL for a site.

        Args:
            site: Site kind and URL

        Returns:
            Feed URL, or None when discovery finds nothing
        """
        rule = FEED_PATH_RULES.get(site.kind)
        if rule is not None:
            path = urlsplit(site.url).path
            feed_url = replace_path(site.url, rule(path))
            self.logger.debug(f"{site.kind.value} rule: {site.url} -> {feed_url}")
            return feed_url

        candidates = self.discoverer.search(site.url)
        if not candidates:
            self.logger.info(f"No feed found for {site.url}")
            return None

        if len(candidates) > 1:
            self.logger.debug(f"Using first of {len(candidates)} candidates for {site.url}")
        return candidates[0]

    def close(self) -> None:
        if self._discoverer is not None:
            self._discoverer.close()

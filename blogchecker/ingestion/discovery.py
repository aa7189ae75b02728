"""
Feed Discovery
==============

Finds candidate feed URLs for an arbitrary site page.

Candidates are collected in this order, duplicates removed:

1. the page URL itself, when it already serves a feed;
2. ``<link rel="alternate">`` elements with an RSS, Atom or RDF type;
3. ``<a href>`` links whose path looks like a feed.
"""

from typing import List, Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

from ..config.settings import BlogCheckerSettings, get_settings
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import ClientError, ErrorCode, NetworkError, ProtocolError, ServerError
from ..utils.validators import URLValidator
from .http_client import StatusClass, classify_status


FEED_MIME_TYPES = (
    "application/rss+xml",
    "application/atom+xml",
    "application/rdf+xml",
)

FEED_CONTENT_TYPES = FEED_MIME_TYPES + (
    "application/xml",
    "text/xml",
)


class FeedDiscoverer:
    """Searches an HTML page for links to its feeds."""

    def __init__(
        self,
        settings: Optional[BlogCheckerSettings] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize discoverer.

        Args:
            settings: Application settings (default: global settings)
            session: requests session to use (default: a new session)
        """
        settings = settings or get_settings()
        self.timeout = settings.discovery.request_timeout
        self.max_candidates = settings.discovery.max_candidates
        self.logger = get_logger_for_component("discovery")

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": settings.fetch.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            }
        )

    def search(self, page_url: str) -> List[str]:
        """Return candidate feed URLs for a page, best first.

        Args:
            page_url: Site page to inspect

        Returns:
            Candidate feed URLs (possibly empty)

        Raises:
            NetworkError: Page could not be reached
            ClientError: Page answered 4xx
            ServerError: Page answered 5xx
        """
        self.logger.info(f"Searching feeds on {page_url}")
        response = self._get_page(page_url)
        base_url = response.url or page_url

        content_type = (response.headers.get("Content-Type") or "").split(";")[0].strip().lower()
        if content_type in FEED_CONTENT_TYPES or self._looks_like_feed_document(response.content):
            self.logger.info(f"Page is itself a feed: {base_url}")
            return [base_url]

        candidates = self.extract_candidates(response.text, base_url)
        if candidates:
            self.logger.info(f"Discovered {len(candidates)} feed candidate(s) on {page_url}")
        else:
            self.logger.warning(f"No feed links found on {page_url}")
        return candidates

    def extract_candidates(self, html_content: str, base_url: str) -> List[str]:
        """Extract feed links from HTML.

        Args:
            html_content: Page markup
            base_url: URL used to resolve relative hrefs

        Returns:
            Absolute candidate URLs in page order, alternates first
        """
        soup = BeautifulSoup(html_content or "", "html.parser")
        candidates: List[str] = []

        def add(href: Optional[str]) -> None:
            if not href or not href.strip():
                return
            url = urljoin(base_url, href.strip())
            if not URLValidator.is_public_url(url):
                self.logger.debug(f"Skipping non-public feed candidate: {url}")
                return
            if url not in candidates:
                candidates.append(url)

        for link in soup.find_all("link", rel="alternate"):
            link_type = (link.get("type") or "").split(";")[0].strip().lower()
            if link_type in FEED_MIME_TYPES:
                add(link.get("href"))

        for anchor in soup.find_all("a", href=True):
            href = anchor.get("href", "")
            if URLValidator.is_likely_feed_url(urljoin(base_url, href.strip())):
                add(href)

        return candidates[: self.max_candidates]

    def _get_page(self, page_url: str) -> requests.Response:
        try:
            response = self.session.get(
                page_url, timeout=self.timeout, hooks={"response": self._refuse_private_redirect}
            )
        except requests.Timeout as e:
            raise NetworkError(
                f"Request timeout after {self.timeout}s: {page_url}", url=page_url,
                error_code=ErrorCode.FEED_FETCH_TIMEOUT,
            ) from e
        except requests.RequestException as e:
            raise NetworkError(f"Failed to fetch {page_url}: {e}", url=page_url) from e

        status_class = classify_status(response.status_code)
        if status_class == StatusClass.SUCCESS:
            return response
        if status_class == StatusClass.CLIENT_ERROR:
            raise ClientError(
                f"HTTP {response.status_code} while searching feeds",
                url=page_url,
                http_status=response.status_code,
            )
        if status_class == StatusClass.SERVER_ERROR:
            raise ServerError(
                f"HTTP {response.status_code} while searching feeds",
                url=page_url,
                http_status=response.status_code,
            )
        raise ProtocolError(
            f"Unexpected HTTP {response.status_code} while searching feeds",
            url=page_url,
            http_status=response.status_code,
        )

    @staticmethod
    def _refuse_private_redirect(response: requests.Response, *args, **kwargs) -> None:
        """Response hook: stop before requests follows a redirect to a non-public host."""
        if not response.is_redirect:
            return
        target = urljoin(response.url, response.headers.get("Location", ""))
        if not URLValidator.is_public_url(target):
            raise ProtocolError(
                f"Redirect to a non-public URL refused: {target}",
                url=response.url,
                http_status=response.status_code,
            )

    @staticmethod
    def _looks_like_feed_document(body: bytes) -> bool:
        """Cheap sniff for RSS/Atom/RDF roots served with an HTML content type."""
        head = (body or b"")[:1024].lstrip().lower()
        return head.startswith(b"<?xml") and (
            b"<rss" in head or b"<feed" in head or b"<rdf:rdf" in head
        )

    def close(self) -> None:
        self.session.close()

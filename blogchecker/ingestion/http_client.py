"""
Bounded Redirect Fetcher
========================

Single-GET HTTP client for feed documents.

- Redirects are followed by an explicit loop, never by the HTTP library,
  so the hop budget is enforced here.
- Responses are classified by status range into a ``StatusClass`` before any
  decision is made, independent of the client library's exception types.
- Running out of redirect budget is a named outcome
  (``FetchOutcome.REDIRECT_LIMIT``), not an exception; callers decide what it
  means for them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urljoin

import requests

from ..config.settings import BlogCheckerSettings, get_settings
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import ClientError, ErrorCode, NetworkError, ProtocolError, ServerError
from ..utils.validators import URLValidator


class StatusClass(str, Enum):
    """HTTP status code classes."""
    INFORMATIONAL = "1xx"
    SUCCESS = "2xx"
    REDIRECTION = "3xx"
    CLIENT_ERROR = "4xx"
    SERVER_ERROR = "5xx"
    UNKNOWN = "unknown"


def classify_status(status_code: int) -> StatusClass:
    """Classify an HTTP status code by its range."""
    if 100 <= status_code < 200:
        return StatusClass.INFORMATIONAL
    if 200 <= status_code < 300:
        return StatusClass.SUCCESS
    if 300 <= status_code < 400:
        return StatusClass.REDIRECTION
    if 400 <= status_code < 500:
        return StatusClass.CLIENT_ERROR
    if 500 <= status_code < 600:
        return StatusClass.SERVER_ERROR
    return StatusClass.UNKNOWN


class FetchOutcome(str, Enum):
    """How a fetch ended when it did not raise."""
    SUCCESS = "success"
    REDIRECT_LIMIT = "redirect_limit"


@dataclass(frozen=True)
class FetchResult:
    """Result of a bounded fetch."""

    outcome: FetchOutcome
    url: str
    final_url: str
    redirects: int = 0
    body: Optional[bytes] = None
    status_code: Optional[int] = None
    content_type: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome == FetchOutcome.SUCCESS

    @property
    def redirect_limit_reached(self) -> bool:
        return self.outcome == FetchOutcome.REDIRECT_LIMIT


class BoundedRedirectFetcher:
    """HTTP GET with status classification and a hard redirect cap."""

    def __init__(
        self,
        settings: Optional[BlogCheckerSettings] = None,
        session: Optional[requests.Session] = None,
        max_redirects: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize fetcher.

        Args:
            settings: Application settings (default: global settings)
            session: requests session to use (default: a new session)
            max_redirects: Redirect budget (default from config)
            timeout: Per-request timeout in seconds (default from config)
        """
        settings = settings or get_settings()
        self.max_redirects = max_redirects if max_redirects is not None else settings.fetch.max_redirects
        self.timeout = timeout if timeout is not None else settings.fetch.request_timeout
        self.user_agent = settings.fetch.user_agent
        self.logger = get_logger_for_component("http")

        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.user_agent})

    def fetch(self, url: str) -> FetchResult:
        """Fetch a URL, following at most the configured number of redirects.

        Args:
            url: URL to fetch

        Returns:
            FetchResult with the body on success, or the REDIRECT_LIMIT outcome

        Raises:
            ProtocolError: 1xx, 3xx without Location, or unrecognized status
            ClientError: 4xx status
            ServerError: 5xx status
            NetworkError: transport failure or timeout
        """
        current_url = url
        redirects = 0

        while True:
            response = self._get(current_url)
            status = response.status_code
            status_class = classify_status(status)

            if status_class == StatusClass.SUCCESS:
                self.logger.debug(
                    f"Fetched {current_url}: HTTP {status}, {len(response.content)} bytes"
                )
                return FetchResult(
                    outcome=FetchOutcome.SUCCESS,
                    url=url,
                    final_url=current_url,
                    redirects=redirects,
                    body=response.content,
                    status_code=status,
                    content_type=response.headers.get("Content-Type"),
                )

            if status_class == StatusClass.REDIRECTION:
                if redirects + 1 >= self.max_redirects:
                    self.logger.warning(
                        f"Redirect limit reached for {url} after {redirects + 1} redirect(s)",
                        extra={"last_url": current_url, "max_redirects": self.max_redirects},
                    )
                    return FetchResult(
                        outcome=FetchOutcome.REDIRECT_LIMIT,
                        url=url,
                        final_url=current_url,
                        redirects=redirects + 1,
                        status_code=status,
                    )

                location = response.headers.get("Location")
                if not location:
                    raise ProtocolError(
                        f"HTTP {status} redirect without Location header",
                        url=current_url,
                        http_status=status,
                    )

                next_url = urljoin(current_url, location)
                if not URLValidator.is_public_url(next_url):
                    raise ProtocolError(
                        f"Redirect to a non-public URL refused: {next_url}",
                        url=current_url,
                        http_status=status,
                    )

                self.logger.warning(f"Following redirect {current_url} -> {next_url}")
                current_url = next_url
                redirects += 1
                continue

            if status_class == StatusClass.INFORMATIONAL:
                raise ProtocolError(
                    f"Unexpected informational response: HTTP {status}",
                    url=current_url,
                    http_status=status,
                )

            if status_class == StatusClass.CLIENT_ERROR:
                raise ClientError(
                    f"HTTP {status} {response.reason or ''}".rstrip(),
                    url=current_url,
                    http_status=status,
                )

            if status_class == StatusClass.SERVER_ERROR:
                raise ServerError(
                    f"HTTP {status} {response.reason or ''}".rstrip(),
                    url=current_url,
                    http_status=status,
                )

            raise ProtocolError(
                f"Unrecognized HTTP status: {status}",
                url=current_url,
                http_status=status,
            )

    def _get(self, url: str) -> requests.Response:
        """Issue one GET without letting requests follow redirects."""
        try:
            return self.session.get(url, timeout=self.timeout, allow_redirects=False)
        except requests.Timeout as e:
            raise NetworkError(
                f"Request timeout after {self.timeout}s: {url}", url=url,
                error_code=ErrorCode.FEED_FETCH_TIMEOUT,
            ) from e
        except requests.RequestException as e:
            raise NetworkError(f"Failed to fetch {url}: {e}", url=url) from e

    def close(self) -> None:
        self.session.close()

"""
BlogChecker Input Validators
============================

URL validation for site URLs arriving at the request boundary, and feed URL
heuristics shared with feed discovery.
"""

import ipaddress
import re
from urllib.parse import urlsplit
from typing import Optional

from .exceptions import ValidationError, ErrorCode


class URLValidator:
    """URL validation and classification utilities."""

    # Allowed schemes for sites and feeds
    ALLOWED_SCHEMES = {"http", "https"}

    # Common RSS/Atom feed patterns
    RSS_PATTERNS = [
        r"\.rss$", r"\.xml$", r"\.atom$", r"\.rdf$",
        r"/rss/?$", r"/feed/?$", r"/feeds/?$",
        r"/atom/?$", r"/rss\.xml$", r"/feed\.xml$",
        r"/index\.xml$", r"/rss/user/[^/]+/?$", r"/api/feed/[^/]+/?$",
    ]

    # Host names a public worker must never be pointed at; literal
    # addresses are checked with ipaddress
    SUSPICIOUS_HOST_PATTERNS = [
        r"^localhost\.?$",
        r"\.localhost\.?$",
    ]

    @classmethod
    def validate_site_url(cls, url: Optional[str]) -> str:
        """Validate a site URL supplied by a caller.

        Args:
            url: URL to validate

        Returns:
            The URL with surrounding whitespace removed

        Raises:
            ValidationError: If URL is missing or unusable
        """
        if not url or not isinstance(url, str) or not url.strip():
            raise ValidationError(
                "URL is required and must be a string",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
                field_name="url",
            )

        url = url.strip()

        try:
            parsed = urlsplit(url)
        except ValueError as e:
            raise ValidationError(
                f"Invalid URL format: {str(e)}",
                error_code=ErrorCode.VALIDATION_INVALID_FORMAT,
                field_name="url",
            ) from e

        if parsed.scheme.lower() not in cls.ALLOWED_SCHEMES:
            raise ValidationError(
                f"URL scheme must be {' or '.join(sorted(cls.ALLOWED_SCHEMES))}",
                error_code=ErrorCode.VALIDATION_INVALID_FORMAT,
                field_name="url",
            )

        if not parsed.hostname:
            raise ValidationError(
                "URL must include a hostname",
                error_code=ErrorCode.VALIDATION_INVALID_FORMAT,
                field_name="url",
            )

        if cls._has_suspicious_host(parsed.hostname):
            raise ValidationError(
                "URL points at a private or local host",
                error_code=ErrorCode.VALIDATION_INVALID_FORMAT,
                field_name="url",
            )

        return url

    @classmethod
    def _has_suspicious_host(cls, hostname: str) -> bool:
        host = hostname.lower()
        if any(re.search(pattern, host) for pattern in cls.SUSPICIOUS_HOST_PATTERNS):
            return True

        try:
            address = ipaddress.ip_address(host)
        except ValueError:
            return False

        return not address.is_global

    @classmethod
    def is_public_url(cls, url: str) -> bool:
        """True for an http(s) URL whose host is not local, private or reserved."""
        if not validate_url(url):
            return False
        hostname = urlsplit(url.strip()).hostname
        return bool(hostname) and not cls._has_suspicious_host(hostname)

    @classmethod
    def is_likely_feed_url(cls, url: str) -> bool:
        """Check if URL is likely an RSS/Atom feed."""
        path = urlsplit(url).path.lower()
        return any(re.search(pattern, path) for pattern in cls.RSS_PATTERNS)


def validate_url(url: str) -> bool:
    """Quick boolean check for an absolute http(s) URL.

    Args:
        url: URL to check

    Returns:
        True if the URL has an allowed scheme and a host
    """
    if not url or not isinstance(url, str):
        return False

    try:
        parsed = urlsplit(url.strip())
    except ValueError:
        return False

    return parsed.scheme.lower() in URLValidator.ALLOWED_SCHEMES and bool(parsed.netloc)

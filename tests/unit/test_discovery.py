"""
Unit Tests for Feed Discovery
=============================

Tests for candidate extraction from HTML and page fetch handling.
"""

import pytest
from unittest.mock import Mock

import requests

from blogchecker.config.settings import BlogCheckerSettings, DiscoverySettings
from blogchecker.ingestion.discovery import FeedDiscoverer
from blogchecker.utils.exceptions import ClientError, NetworkError, ProtocolError, ServerError


PAGE_URL = "https://blog.example.com/"

SAMPLE_PAGE = '''<!DOCTYPE html>
<html>
<head>
  <title>Example blog</title>
  <link rel="stylesheet" type="text/css" href="/style.css">
  <link rel="alternate" type="application/rss+xml" title="RSS" href="/rss.xml">
  <link rel="alternate" type="application/atom+xml; charset=utf-8" href="https://blog.example.com/atom.xml">
  <link rel="alternate" hreflang="en" href="/en/">
</head>
<body>
  <a href="/about">About</a>
  <a href="/feed">Subscribe</a>
  <a href="/rss.xml">RSS again</a>
  <a href="mailto:someone@example.com">Mail</a>
</body>
</html>'''

RSS_DOCUMENT = b'''<?xml version="1.0"?>
<rss version="2.0"><channel><title>t</title></channel></rss>'''


class TestExtractCandidates:
    """Test cases for parsing feed links out of HTML."""

    def setup_method(self):
        """Set up test environment."""
        self.discoverer = FeedDiscoverer(settings=BlogCheckerSettings())

    def test_alternates_then_anchors(self):
        candidates = self.discoverer.extract_candidates(SAMPLE_PAGE, PAGE_URL)

        assert candidates == [
            "https://blog.example.com/rss.xml",
            "https://blog.example.com/atom.xml",
            "https://blog.example.com/feed",
        ]

    def test_relative_hrefs_resolved_against_page(self):
        html = '<link rel="alternate" type="application/rdf+xml" href="index.rdf">'

        assert self.discoverer.extract_candidates(html, "https://example.com/blog/") == [
            "https://example.com/blog/index.rdf"
        ]

    def test_no_feed_links(self):
        assert self.discoverer.extract_candidates("<html><body>hi</body></html>", PAGE_URL) == []

    def test_candidate_cap(self):
        settings = BlogCheckerSettings(discovery=DiscoverySettings(max_candidates=2))
        discoverer = FeedDiscoverer(settings=settings)

        assert len(discoverer.extract_candidates(SAMPLE_PAGE, PAGE_URL)) == 2

    def test_non_public_candidates_skipped(self):
        html = (
            '<link rel="alternate" type="application/rss+xml" href="http://10.0.0.8/rss.xml">'
            '<a href="http://169.254.169.254/feed">meta</a>'
            '<a href="/feed">feed</a>'
        )

        assert self.discoverer.extract_candidates(html, PAGE_URL) == [
            "https://blog.example.com/feed"
        ]


class TestFeedDiscoverer:
    """Test cases for FeedDiscoverer.search."""

    @pytest.fixture
    def discoverer(self, test_settings, mock_session):
        return FeedDiscoverer(settings=test_settings, session=mock_session)

    def test_search_html_page(self, discoverer, mock_session, response_factory):
        mock_session.get.return_value = response_factory(
            200,
            SAMPLE_PAGE.encode("utf-8"),
            {"Content-Type": "text/html; charset=utf-8"},
            url=PAGE_URL,
        )

        candidates = discoverer.search(PAGE_URL)

        assert candidates[0] == "https://blog.example.com/rss.xml"
        assert mock_session.headers["User-Agent"] == "BlogCheckerBot/1.0 (@onk)"

    def test_page_served_as_feed(self, discoverer, mock_session, response_factory):
        mock_session.get.return_value = response_factory(
            200, RSS_DOCUMENT, {"Content-Type": "application/rss+xml"}, url="https://example.com/rss"
        )

        assert discoverer.search("https://example.com/rss") == ["https://example.com/rss"]

    def test_feed_sniffed_despite_html_content_type(self, discoverer, mock_session, response_factory):
        mock_session.get.return_value = response_factory(
            200, RSS_DOCUMENT, {"Content-Type": "text/html"}, url="https://example.com/index"
        )

        assert discoverer.search("https://example.com/index") == ["https://example.com/index"]

    def test_redirected_page_uses_final_url(self, discoverer, mock_session, response_factory):
        mock_session.get.return_value = response_factory(
            200,
            b'<link rel="alternate" type="application/atom+xml" href="feed.atom">',
            {"Content-Type": "text/html"},
            url="https://www.example.com/blog/",
        )

        assert discoverer.search("http://example.com/") == ["https://www.example.com/blog/feed.atom"]

    def test_client_error(self, discoverer, mock_session, response_factory):
        mock_session.get.return_value = response_factory(404, url=PAGE_URL)

        with pytest.raises(ClientError):
            discoverer.search(PAGE_URL)

    def test_server_error(self, discoverer, mock_session, response_factory):
        mock_session.get.return_value = response_factory(500, url=PAGE_URL)

        with pytest.raises(ServerError):
            discoverer.search(PAGE_URL)

    def test_timeout(self, discoverer, mock_session):
        mock_session.get.side_effect = requests.Timeout("slow")

        with pytest.raises(NetworkError):
            discoverer.search(PAGE_URL)

    def test_redirect_guard_installed(self, discoverer, mock_session, response_factory):
        mock_session.get.return_value = response_factory(200, b"<html></html>", url=PAGE_URL)

        discoverer.search(PAGE_URL)

        hooks = mock_session.get.call_args[1]["hooks"]
        assert hooks["response"] == FeedDiscoverer._refuse_private_redirect

    def test_redirect_to_private_host_refused(self):
        response = Mock(
            is_redirect=True,
            url=PAGE_URL,
            status_code=302,
            headers={"Location": "http://169.254.169.254/latest/meta-data/"},
        )

        with pytest.raises(ProtocolError) as exc_info:
            FeedDiscoverer._refuse_private_redirect(response)

        assert exc_info.value.status_code == 502

    def test_public_redirect_allowed(self):
        response = Mock(
            is_redirect=True,
            url="http://example.com/",
            status_code=301,
            headers={"Location": "/blog/"},
        )

        assert FeedDiscoverer._refuse_private_redirect(response) is None

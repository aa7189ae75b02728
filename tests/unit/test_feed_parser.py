"""
Unit Tests for Feed Parsing
===========================

Tests for RSS/Atom parsing into ParsedFeed and rejection of non-feeds.
"""

import pytest

from blogchecker.ingestion.feed_parser import parse_feed
from blogchecker.models import FeedEntry
from blogchecker.utils.exceptions import ErrorCode, ParseError


SAMPLE_RSS_FEED = b'''<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
    <channel>
        <title>Test RSS Feed</title>
        <link>http://example.com</link>
        <description>Test feed for unit testing</description>
        <item>
            <title>Test Article 1</title>
            <link>http://example.com/article1</link>
            <description>This is a test article summary with &lt;strong&gt;HTML&lt;/strong&gt;</description>
        </item>
        <item>
            <title>Test Article 2</title>
            <link>http://example.com/article2</link>
            <description>Short summary</description>
            <content:encoded><![CDATA[<p>Full <em>content</em> here</p>]]></content:encoded>
        </item>
        <item>
            <description>Neither title nor link</description>
        </item>
    </channel>
</rss>'''

SAMPLE_ATOM_FEED = b'''<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
    <title>Test Atom Feed</title>
    <link href="http://example.com"/>
    <id>http://example.com/feed</id>
    <updated>2024-09-07T00:00:01Z</updated>
    <entry>
        <title>Atom Test Article</title>
        <link href="http://example.com/atom-article"/>
        <id>http://example.com/atom-article</id>
        <updated>2024-09-05T12:00:00Z</updated>
        <summary>This is an Atom article summary</summary>
        <content type="html">&lt;p&gt;Full content with &lt;em&gt;formatting&lt;/em&gt;&lt;/p&gt;</content>
    </entry>
</feed>'''


class TestParseFeed:
    """Test cases for parse_feed."""

    def test_rss_entries_in_order(self):
        feed = parse_feed(SAMPLE_RSS_FEED, "http://example.com/rss.xml")

        assert feed.title == "Test RSS Feed"
        assert feed.version.startswith("rss")
        assert [entry.title for entry in feed.entries] == ["Test Article 1", "Test Article 2"]
        assert [entry.url for entry in feed.entries] == [
            "http://example.com/article1",
            "http://example.com/article2",
        ]

    def test_rss_description_is_summary(self):
        feed = parse_feed(SAMPLE_RSS_FEED)
        first = feed.entries[0]

        assert first.content is None
        assert "HTML" in first.summary
        assert first.body == first.summary

    def test_rss_content_encoded_is_content(self):
        second = parse_feed(SAMPLE_RSS_FEED).entries[1]

        assert "Full" in second.content
        assert second.summary == "Short summary"
        assert second.body == second.content

    def test_atom_content_and_summary(self):
        feed = parse_feed(SAMPLE_ATOM_FEED)

        assert feed.version == "atom10"
        assert len(feed) == 1
        entry = feed.entries[0]
        assert entry.title == "Atom Test Article"
        assert entry.url == "http://example.com/atom-article"
        assert "<p>Full content" in entry.content
        assert entry.summary == "This is an Atom article summary"

    def test_hatenablog_feed(self, hatenablog_feed):
        feed = parse_feed(hatenablog_feed)

        assert len(feed) == 6
        assert feed.entries[4].content is None
        assert feed.entries[4].body == "TypeScriptとPythonで機械学習"

    def test_empty_body(self):
        with pytest.raises(ParseError) as exc_info:
            parse_feed(b"", "http://example.com/feed")

        assert exc_info.value.error_code == ErrorCode.FEED_PARSE_ERROR
        assert exc_info.value.context["feed_url"] == "http://example.com/feed"

    def test_html_page_is_not_a_feed(self):
        with pytest.raises(ParseError):
            parse_feed(b"<html><body><p>Just a page</p></body></html>")

    def test_garbage_is_not_a_feed(self):
        with pytest.raises(ParseError):
            parse_feed(b"\x00\x01not a feed at all")

    def test_empty_but_valid_feed(self):
        body = b'<?xml version="1.0"?><rss version="2.0"><channel><title>Empty</title></channel></rss>'

        feed = parse_feed(body)

        assert feed.entries == []
        assert feed.title == "Empty"


class TestFeedEntry:
    """Test cases for the FeedEntry body fallback."""

    def test_body_prefers_content(self):
        entry = FeedEntry(title="t", url="u", content="c", summary="s")
        assert entry.body == "c"

    def test_body_falls_back_to_summary_then_empty(self):
        assert FeedEntry(title="t", url="u", summary="s").body == "s"
        assert FeedEntry(title="t", url="u").body == ""

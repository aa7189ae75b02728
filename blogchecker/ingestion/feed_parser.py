"""
Feed Parser
===========

Parses raw RSS/Atom/RDF bytes with feedparser into a ``ParsedFeed`` whose
entries keep source order.
"""

from typing import Any, Optional

import feedparser

from ..models import FeedEntry, ParsedFeed
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import ParseError


logger = get_logger_for_component("feed_parser")


def parse_feed(body: bytes, feed_url: Optional[str] = None) -> ParsedFeed:
    """Parse a feed document.

    Args:
        body: Raw response body
        feed_url: Source URL, used for error context and logging

    Returns:
        ParsedFeed with entries in document order

    Raises:
        ParseError: If the bytes are not a recognizable feed
    """
    if not body or not body.strip():
        raise ParseError("Feed body is empty", feed_url=feed_url)

    try:
        parsed = feedparser.parse(body)
    except Exception as e:
        raise ParseError(f"Feed parser failed: {e}", feed_url=feed_url) from e

    version = getattr(parsed, "version", "") or ""
    entries = getattr(parsed, "entries", None) or []

    if not version and not entries:
        reason = getattr(parsed, "bozo_exception", None) or "no RSS/Atom structure found"
        raise ParseError(f"Not a recognizable feed: {reason}", feed_url=feed_url)

    if getattr(parsed, "bozo", False):
        # Many feeds have minor formatting issues; keep whatever parsed
        logger.warning(
            f"Feed parsing warning for {feed_url or 'feed'}: {parsed.bozo_exception}"
        )

    feed_entries = []
    for entry in entries:
        feed_entry = _extract_entry(entry)
        if feed_entry is None:
            logger.debug(f"Skipping entry without title or link in {feed_url or 'feed'}")
            continue
        feed_entries.append(feed_entry)

    feed_title = ""
    if hasattr(parsed, "feed"):
        feed_title = (parsed.feed.get("title") or "").strip()

    logger.debug(f"Parsed {len(feed_entries)} entries from {feed_url or 'feed'} ({version})")
    return ParsedFeed(entries=feed_entries, title=feed_title, version=version)


def _extract_entry(entry_data: Any) -> Optional[FeedEntry]:
    """Normalize one feedparser entry. Entries without title and link are dropped."""
    title = (entry_data.get("title") or "").strip()
    link = (entry_data.get("link") or "").strip()

    if not title and not link:
        return None

    # Atom content is a list of dicts; first one is the primary representation
    content = None
    content_list = entry_data.get("content")
    if isinstance(content_list, list) and content_list:
        first = content_list[0]
        if isinstance(first, dict):
            content = first.get("value") or None

    summary = entry_data.get("summary") or entry_data.get("description") or None

    return FeedEntry(title=title, url=link, content=content, summary=summary)

"""
Feed Filter Pipeline
====================

Resolve -> pause -> fetch -> parse -> sanitize -> count techwords -> keep
entries at or above the threshold, projected to ``{title, url}`` in feed
order.
"""

import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..config.settings import BlogCheckerSettings, get_settings
from ..ingestion.content_cleaner import sanitize_text
from ..ingestion.feed_parser import parse_feed
from ..ingestion.http_client import BoundedRedirectFetcher
from ..ingestion.resolver import FeedURLResolver
from ..models import FeedEntry, FilteredEntry, ParsedFeed, SiteDescriptor
from ..utils.logging import get_logger_for_component, PerformanceLogger
from ..utils.exceptions import ConfigurationError, ErrorCode, RedirectLimitError
from .techwords import TechwordPatternProvider, count_techwords, find_techwords


@dataclass
class EntryScore:
    """Techword score of a single entry."""
    entry: FeedEntry
    count: int
    matches: List[str]
    passed: bool


class FeedFilterPipeline:
    """Returns the technical entries of a site's feed."""

    def __init__(
        self,
        pattern_provider: TechwordPatternProvider,
        settings: Optional[BlogCheckerSettings] = None,
        resolver: Optional[FeedURLResolver] = None,
        fetcher: Optional[BoundedRedirectFetcher] = None,
        parser: Callable[..., ParsedFeed] = parse_feed,
        sanitizer: Callable[[Optional[str]], str] = sanitize_text,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize pipeline.

        Args:
            pattern_provider: Source of the shared techword pattern
            settings: Application settings (default: global settings)
            resolver: Feed URL resolver
            fetcher: Bounded redirect fetcher
            parser: Feed parser callable ``(body, feed_url) -> ParsedFeed``
            sanitizer: Markup stripper
            sleep: Blocking sleep used for the pre-fetch delay
        """
        self.settings = settings or get_settings()
        self.pattern_provider = pattern_provider
        self.resolver = resolver or FeedURLResolver()
        self.fetcher = fetcher or BoundedRedirectFetcher(settings=self.settings)
        self.parser = parser
        self.sanitizer = sanitizer
        self.sleep = sleep

        self.threshold = self.settings.filtering.techword_threshold
        self.pre_fetch_delay = self.settings.fetch.pre_fetch_delay
        self.logger = get_logger_for_component("pipeline")

    def run(self, site: SiteDescriptor) -> List[FilteredEntry]:
        """Run the pipeline for one site.

        Args:
            site: Site kind and URL

        Returns:
            Entries with at least ``threshold`` techword matches, feed order

        Raises:
            ConfigurationError: No feed URL could be determined (F006)
            RedirectLimitError: Feed URL redirects past the budget
            FetchError: Any classified fetch failure
            ParseError: Feed body is not a feed
        """
        log = self.logger.bind(site_url=site.url)
        with PerformanceLogger(log, "pipeline run", kind=site.kind.value):
            with PerformanceLogger(log, "feed resolution"):
                feed_url = self.resolver.resolve(site)

            if not feed_url:
                raise ConfigurationError(
                    "could not determine a feed URL for this site",
                    error_code=ErrorCode.FEED_NOT_FOUND,
                    context={"site_url": site.url, "kind": site.kind.value},
                    user_message="No feed found for this site",
                )

            log = log.bind(feed_url=feed_url)
            log.info(f"Resolved feed URL: {feed_url}")

            self.sleep(self.pre_fetch_delay)

            with PerformanceLogger(log, "feed fetch"):
                result = self.fetcher.fetch(feed_url)

            if result.redirect_limit_reached:
                raise RedirectLimitError(
                    f"Too many redirects fetching feed (limit {self.fetcher.max_redirects})",
                    url=feed_url,
                    http_status=result.status_code,
                    context={"last_url": result.final_url, "redirects": result.redirects},
                )

            feed = self.parser(result.body, feed_url)
            kept = self.filter_entries(feed)

            log.info(
                f"Kept {len(kept)} of {len(feed)} entries",
                extra={"threshold": self.threshold},
            )
            return kept

    def filter_entries(self, feed: ParsedFeed) -> List[FilteredEntry]:
        """Keep technical entries of a parsed feed. Pure given the pattern."""
        return [
            FilteredEntry.from_entry(entry)
            for entry in feed.entries
            if self.is_technical(entry)
        ]

    def entry_text(self, entry: FeedEntry) -> str:
        """Sanitized concatenation of title and body."""
        return self.sanitizer((entry.title or "") + entry.body)

    def is_technical(self, entry: FeedEntry) -> bool:
        pattern = self.pattern_provider.get()
        return count_techwords(pattern, self.entry_text(entry)) >= self.threshold

    def score_entry(self, entry: FeedEntry) -> EntryScore:
        """Score an entry with the matched techwords, for diagnostics."""
        pattern = self.pattern_provider.get()
        matches = find_techwords(pattern, self.entry_text(entry))
        return EntryScore(
            entry=entry,
            count=len(matches),
            matches=matches,
            passed=len(matches) >= self.threshold,
        )

    def close(self) -> None:
        """Release the HTTP sessions held by the fetcher and resolver."""
        self.fetcher.close()
        self.resolver.close()

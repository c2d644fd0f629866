"""Incremental feed polling with per-source watermarks."""

from __future__ import annotations

import logging
import queue
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable

from common.config import FeedSource
from common.models import Article
from enrich_articles.enrich import enrich_article
from fetch_feeds.fetch_rss_entries import entry_to_article, fetch_feed

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = timedelta(minutes=5)

# How often a blocked hand-off re-checks for cancellation
PUT_TIMEOUT_SECONDS = 0.5


class FeedFetcher:
    """Polls a fixed list of feeds and emits articles newer than each feed's watermark.

    A feed's watermark is the publish time of the newest article accepted from it.
    It starts at ``now - init_pull`` and only moves forward, after a poll that found
    at least one new article. Feeds are assumed to be reverse-chronological; an
    article back-dated to before the watermark is never picked up.
    """

    def __init__(
        self,
        sources: Iterable[FeedSource],
        init_pull: timedelta,
        poll_interval: timedelta = DEFAULT_POLL_INTERVAL,
        enrich: Callable[[Article], Article] = enrich_article,
        fetch: Callable[[str], list[Any]] = fetch_feed,
        now: datetime | None = None,
    ) -> None:
        self.sources = list(sources)
        self.poll_interval = poll_interval
        self._enrich = enrich
        self._fetch = fetch

        init_from = (now or datetime.now(timezone.utc)) - init_pull
        self._watermarks: dict[str, datetime] = {source.url: init_from for source in self.sources}

    @property
    def watermarks(self) -> dict[str, datetime]:
        """Copy of the current watermark per feed url."""
        return dict(self._watermarks)

    def poll_source(self, source: FeedSource) -> list[Article]:
        """Fetch one feed and return its new, enriched articles in document order.

        Network and parse errors propagate to the caller.
        """
        watermark = self._watermarks[source.url]
        logger.debug("Fetching feed %s (%s). Previous pull time: %s", source.name, source.url, watermark.isoformat())

        entries = self._fetch(source.url)
        logger.debug("Fetched %d items from %s", len(entries), source.name)

        articles = []
        for entry in entries:
            article = entry_to_article(entry)
            if article is None or article.published <= watermark:
                continue
            articles.append(self._enrich(article))

        if articles:
            self._watermarks[source.url] = max(article.published for article in articles)
            logger.debug(
                "Found %d new articles in %s, updated last pull time to %s",
                len(articles),
                source.name,
                self._watermarks[source.url].isoformat(),
            )
        else:
            logger.debug("No new articles in %s", source.name)

        return articles

    def _poll_source_or_skip(self, source: FeedSource) -> list[Article]:
        """Poll one feed; a failure is logged and yields no articles."""
        try:
            return self.poll_source(source)
        except Exception as e:
            logger.error("Failed to fetch feed %s (%s): %s", source.name, source.url, e)
            return []

    def poll_once(self) -> list[Article]:
        """Poll every feed once. A failing feed is logged and skipped."""
        articles = []
        for source in self.sources:
            articles.extend(self._poll_source_or_skip(source))
        logger.info("Collected %d articles", len(articles))
        return articles

    def run(self, articles: queue.Queue, stop_event: threading.Event) -> None:
        """Poll all feeds every ``poll_interval`` and put new articles on the queue until stopped."""
        logger.info("Starting to fetch feeds")
        while not stop_event.is_set():
            collected = 0
            for source in self.sources:
                if stop_event.is_set():
                    return
                new_articles = self._poll_source_or_skip(source)
                for article in new_articles:
                    if not _put(articles, article, stop_event):
                        return
                collected += len(new_articles)

            logger.info("Collected %d articles. Sleeping for %s", collected, self.poll_interval)
            if stop_event.wait(self.poll_interval.total_seconds()):
                break
        logger.info("Feed fetcher stopped")

    def start(self, articles: queue.Queue, stop_event: threading.Event) -> threading.Thread:
        """Run the poll loop in a background thread."""
        thread = threading.Thread(
            target=self.run,
            args=(articles, stop_event),
            name="feed-fetcher",
            daemon=True,
        )
        thread.start()
        return thread


def _put(articles: queue.Queue, article: Article, stop_event: threading.Event) -> bool:
    """Block until the article is handed off or cancellation is requested."""
    while not stop_event.is_set():
        try:
            articles.put(article, timeout=PUT_TIMEOUT_SECONDS)
            return True
        except queue.Full:
            continue
    return False

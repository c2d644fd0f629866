"""Tests for fetch_feeds.feed_fetcher module."""

import queue
import threading
import time
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

from common.config import FeedSource
from fetch_feeds.feed_fetcher import FeedFetcher

NOW = datetime(2024, 1, 10, 12, 0, 0, tzinfo=timezone.utc)

FEED_A = FeedSource(name="A", url="https://a.example.com/rss")
FEED_B = FeedSource(name="B", url="https://b.example.com/rss")


def _entry(link: str, published: datetime | None) -> dict:
    entry = {"link": link, "title": f"Title {link}", "summary": "summary"}
    if published is not None:
        entry["published_parsed"] = published.utctimetuple()
    return entry


def _hours_ago(hours: int) -> datetime:
    return NOW - timedelta(hours=hours)


def _identity(article):
    return article


def _make_fetcher(feeds: dict[str, list], sources=(FEED_A,), enrich=_identity) -> FeedFetcher:
    fetch = Mock(side_effect=lambda url: feeds[url])
    return FeedFetcher(
        sources,
        init_pull=timedelta(days=1),
        enrich=enrich,
        fetch=fetch,
        now=NOW,
    )


class TestInit:
    def test_seeds_watermarks_from_init_pull(self) -> None:
        fetcher = FeedFetcher([FEED_A, FEED_B], init_pull=timedelta(days=2), fetch=Mock(), now=NOW)
        assert fetcher.watermarks == {
            FEED_A.url: NOW - timedelta(days=2),
            FEED_B.url: NOW - timedelta(days=2),
        }

    def test_no_sources(self) -> None:
        fetcher = FeedFetcher([], init_pull=timedelta(hours=1), fetch=Mock(), now=NOW)
        assert fetcher.watermarks == {}
        assert fetcher.poll_once() == []

    def test_default_now_is_current_time(self) -> None:
        before = datetime.now(timezone.utc)
        fetcher = FeedFetcher([FEED_A], init_pull=timedelta(hours=1), fetch=Mock())
        after = datetime.now(timezone.utc)
        assert before - timedelta(hours=1) <= fetcher.watermarks[FEED_A.url] <= after - timedelta(hours=1)


class TestPollSource:
    def test_keeps_only_entries_after_watermark(self) -> None:
        fetcher = _make_fetcher({
            FEED_A.url: [
                _entry("https://a/3", _hours_ago(1)),
                _entry("https://a/2", _hours_ago(5)),
                _entry("https://a/old", _hours_ago(48)),
            ]
        })

        articles = fetcher.poll_source(FEED_A)

        assert [a.link for a in articles] == ["https://a/3", "https://a/2"]

    def test_entry_at_watermark_is_not_new(self) -> None:
        fetcher = _make_fetcher({FEED_A.url: [_entry("https://a/1", NOW - timedelta(days=1))]})
        assert fetcher.poll_source(FEED_A) == []

    def test_advances_watermark_to_max_published(self) -> None:
        # Out-of-order feed: the newest item isn't first
        fetcher = _make_fetcher({
            FEED_A.url: [
                _entry("https://a/2", _hours_ago(5)),
                _entry("https://a/3", _hours_ago(1)),
            ]
        })

        fetcher.poll_source(FEED_A)

        assert fetcher.watermarks[FEED_A.url] == _hours_ago(1)

    def test_empty_poll_leaves_watermark_unchanged(self) -> None:
        fetcher = _make_fetcher({FEED_A.url: [_entry("https://a/old", _hours_ago(48))]})
        before = fetcher.watermarks[FEED_A.url]

        assert fetcher.poll_source(FEED_A) == []
        assert fetcher.watermarks[FEED_A.url] == before

    def test_drops_entry_without_date(self) -> None:
        entry = {"link": "https://a/nodate", "title": "T", "published": "not a date"}
        fetcher = _make_fetcher({FEED_A.url: [entry]})
        before = fetcher.watermarks[FEED_A.url]

        assert fetcher.poll_source(FEED_A) == []
        assert fetcher.watermarks[FEED_A.url] == before

    def test_no_duplicate_delivery_across_polls(self) -> None:
        entries = [_entry("https://a/2", _hours_ago(2)), _entry("https://a/1", _hours_ago(3))]
        fetcher = _make_fetcher({FEED_A.url: entries})

        first = fetcher.poll_source(FEED_A)
        second = fetcher.poll_source(FEED_A)

        assert len(first) == 2
        assert second == []

    def test_new_entry_after_previous_poll(self) -> None:
        feeds = {FEED_A.url: [_entry("https://a/1", _hours_ago(3))]}
        fetcher = _make_fetcher(feeds)
        fetcher.poll_source(FEED_A)

        feeds[FEED_A.url] = [_entry("https://a/2", _hours_ago(1))] + feeds[FEED_A.url]
        articles = fetcher.poll_source(FEED_A)

        assert [a.link for a in articles] == ["https://a/2"]
        assert fetcher.watermarks[FEED_A.url] == _hours_ago(1)

    def test_watermark_is_monotonic(self) -> None:
        feeds = {FEED_A.url: [_entry("https://a/2", _hours_ago(2))]}
        fetcher = _make_fetcher(feeds)
        history = [fetcher.watermarks[FEED_A.url]]

        for entries in (
            [_entry("https://a/2", _hours_ago(2))],
            [_entry("https://a/backdated", _hours_ago(10))],
            [_entry("https://a/3", _hours_ago(1)), _entry("https://a/2", _hours_ago(2))],
            [],
        ):
            feeds[FEED_A.url] = entries
            fetcher.poll_source(FEED_A)
            history.append(fetcher.watermarks[FEED_A.url])

        assert history == sorted(history)
        assert history[-1] == _hours_ago(1)

    def test_applies_enricher_to_kept_entries(self) -> None:
        enrich = Mock(side_effect=lambda a: replace(a, content="enriched"))
        fetcher = _make_fetcher(
            {FEED_A.url: [_entry("https://a/1", _hours_ago(1)), _entry("https://a/old", _hours_ago(72))]},
            enrich=enrich,
        )

        articles = fetcher.poll_source(FEED_A)

        assert [a.content for a in articles] == ["enriched"]
        enrich.assert_called_once()


class TestPollOnce:
    def test_failing_source_does_not_block_others(self) -> None:
        def fetch(url):
            if url == FEED_A.url:
                raise ConnectionError("boom")
            return [_entry("https://b/1", _hours_ago(1))]

        fetcher = FeedFetcher([FEED_A, FEED_B], init_pull=timedelta(days=1), enrich=_identity, fetch=fetch, now=NOW)

        articles = fetcher.poll_once()

        assert [a.link for a in articles] == ["https://b/1"]
        assert fetcher.watermarks[FEED_A.url] == NOW - timedelta(days=1)
        assert fetcher.watermarks[FEED_B.url] == _hours_ago(1)


class TestRun:
    def test_failing_source_does_not_block_others_in_same_cycle(self) -> None:
        def fetch(url):
            if url == FEED_A.url:
                raise ValueError("Failed to parse feed")
            return [_entry("https://b/2", _hours_ago(1)), _entry("https://b/1", _hours_ago(2))]

        fetcher = FeedFetcher([FEED_A, FEED_B], init_pull=timedelta(days=1), enrich=_identity, fetch=fetch, now=NOW)
        fetcher.poll_interval = timedelta(seconds=30)
        articles: queue.Queue = queue.Queue()
        stop_event = threading.Event()

        thread = fetcher.start(articles, stop_event)
        links = [articles.get(timeout=5).link, articles.get(timeout=5).link]
        stop_event.set()
        thread.join(timeout=5)

        assert links == ["https://b/2", "https://b/1"]
        assert fetcher.watermarks[FEED_A.url] == NOW - timedelta(days=1)
        assert fetcher.watermarks[FEED_B.url] == _hours_ago(1)

    def test_emits_articles_and_stops_on_cancellation(self) -> None:
        fetcher = _make_fetcher({
            FEED_A.url: [_entry("https://a/2", _hours_ago(1)), _entry("https://a/1", _hours_ago(2))]
        })
        fetcher.poll_interval = timedelta(seconds=30)
        articles: queue.Queue = queue.Queue()
        stop_event = threading.Event()

        thread = fetcher.start(articles, stop_event)
        first = articles.get(timeout=5)
        second = articles.get(timeout=5)
        stop_event.set()
        thread.join(timeout=5)

        assert not thread.is_alive()
        assert [first.link, second.link] == ["https://a/2", "https://a/1"]

    def test_blocked_producer_exits_on_cancellation(self) -> None:
        fetcher = _make_fetcher({
            FEED_A.url: [_entry("https://a/2", _hours_ago(1)), _entry("https://a/1", _hours_ago(2))]
        })
        articles: queue.Queue = queue.Queue(maxsize=1)
        stop_event = threading.Event()

        thread = fetcher.start(articles, stop_event)
        # Nobody consumes; the producer waits on the full queue with the second article
        deadline = time.monotonic() + 5
        while not articles.full() and time.monotonic() < deadline:
            time.sleep(0.01)
        stop_event.set()
        thread.join(timeout=5)

        assert not thread.is_alive()
        assert articles.get_nowait().link == "https://a/2"
        assert articles.empty()

    def test_failing_source_is_skipped(self) -> None:
        def fetch(url):
            if url == FEED_A.url:
                raise ConnectionError("boom")
            return [_entry("https://b/1", _hours_ago(1))]

        fetcher = FeedFetcher([FEED_A, FEED_B], init_pull=timedelta(days=1), enrich=_identity, fetch=fetch, now=NOW)
        articles: queue.Queue = queue.Queue()
        stop_event = threading.Event()

        thread = fetcher.start(articles, stop_event)
        article = articles.get(timeout=5)
        stop_event.set()
        thread.join(timeout=5)

        assert article.link == "https://b/1"

"""RSS feed fetching and entry parsing."""

import logging
from datetime import datetime, timezone, timedelta
from typing import Any, Optional

import feedparser
import requests
from dateutil.parser import parse as parse_date

from common.models import Article

logger = logging.getLogger(__name__)

FEED_REQUEST_TIMEOUT = 30

# Timezone abbreviations for date parsing
TZINFOS = {
    "EST": timezone(timedelta(hours=-5)),
    "EDT": timezone(timedelta(hours=-4)),
    "CST": timezone(timedelta(hours=-6)),
    "CDT": timezone(timedelta(hours=-5)),
    "MST": timezone(timedelta(hours=-7)),
    "MDT": timezone(timedelta(hours=-6)),
    "PST": timezone(timedelta(hours=-8)),
    "PDT": timezone(timedelta(hours=-7)),
    "GMT": timezone.utc,
    "UTC": timezone.utc,
    "BST": timezone(timedelta(hours=1)),
}

# Formats feedparser doesn't understand but some vendors publish anyway.
# "Jan 2, 2006 15:04:05-0700" is used by the CrowdStrike blog feed.
FALLBACK_DATE_FORMATS = [
    "%b %d, %Y %H:%M:%S%z",
]


def fetch_feed(feed_url: str, timeout: float = FEED_REQUEST_TIMEOUT) -> list[Any]:
    """Download and parse a feed document, returning its entries in document order.

    Raises:
        requests.RequestException: On network or HTTP errors.
        ValueError: If the document can't be parsed as a feed.
    """
    response = requests.get(
        feed_url,
        timeout=timeout,
        headers={"User-Agent": "secfeed/1.0 (RSS reader)"},
    )
    response.raise_for_status()

    feed = feedparser.parse(response.content)
    if feed.bozo and not feed.entries:
        raise ValueError(f"Failed to parse feed {feed_url}: {feed.get('bozo_exception')}")

    return list(feed.entries)


def parse_published_date(entry: Any) -> Optional[datetime]:
    """Return the entry's publish time as an aware datetime, or None if it can't be determined."""
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if parsed:
        # feedparser normalizes *_parsed values to UTC
        return datetime(*parsed[:6], tzinfo=timezone.utc)

    published = (entry.get("published") or entry.get("updated") or "").strip()
    if not published:
        return None

    for fmt in FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(published, fmt)
        except ValueError:
            continue

    try:
        dt = parse_date(published, tzinfos=TZINFOS)
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def entry_to_article(entry: Any) -> Optional[Article]:
    """Convert a feedparser entry into an Article.

    Returns None for entries that can't be ordered (no usable publish date)
    or identified (no link).
    """
    link = (entry.get("link") or "").strip()
    title = (entry.get("title") or "").strip()
    if not link:
        logger.warning("Skipping entry without link: title=%s", title)
        return None

    published = parse_published_date(entry)
    if published is None:
        logger.warning("Published date is missing or unparseable: title=%s link=%s", title, link)
        return None

    return Article(
        title=title,
        description=(entry.get("summary") or entry.get("description") or "").strip(),
        link=link,
        content=_entry_content(entry),
        published=published,
        categories=[tag.get("term") for tag in entry.get("tags") or [] if tag.get("term")],
    )


def _entry_content(entry: Any) -> str:
    contents = entry.get("content") or []
    return "\n".join(c.get("value", "") for c in contents if c.get("value")).strip()

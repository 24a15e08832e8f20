#!/usr/bin/env python3
"""
RSS Feed Parser for Alert Ingestion

Fetches RSS feeds from Israeli news sites with Hebrew-friendly request
headers and turns their entries into FeedItems with ISO-8601 UTC dates.
"""

import uuid
import logging
from datetime import datetime
from typing import List, Optional, Tuple, Iterable

import feedparser
import requests
import pytz
from dateutil import parser as date_parser

from .exceptions import SourceConnectionError, SourceParseError, SourceError
from .models import FeedItem, FeedSource, NO_DESCRIPTION_PLACEHOLDER
from .text_sanitizer import strip_html

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = 'Mozilla/5.0 (compatible; AlertRelay/1.0)'

REQUEST_HEADERS = {
    'Accept': 'application/rss+xml, application/xml, text/xml, */*',
    'Accept-Language': 'he-IL,he;q=0.9,en;q=0.8',
}


def _now_iso() -> str:
    return datetime.now(pytz.utc).isoformat()


def normalize_pub_date(entry) -> str:
    """Return the entry's publication date as ISO-8601 UTC, or now when missing/unparsable."""
    for field in ('published', 'updated', 'created'):
        date_str = entry.get(field)
        if not date_str:
            continue
        try:
            dt = date_parser.parse(date_str)
        except (ValueError, OverflowError) as e:
            logger.debug(f"Failed to parse date '{date_str}': {e}")
            continue
        if dt.tzinfo is None:
            dt = pytz.utc.localize(dt)
        return dt.astimezone(pytz.utc).isoformat()

    parsed = entry.get('published_parsed') or entry.get('updated_parsed')
    if parsed:
        try:
            return pytz.utc.localize(datetime(*parsed[:6])).isoformat()
        except (TypeError, ValueError) as e:
            logger.debug(f"Failed to parse published_parsed: {e}")

    return _now_iso()


def parse_feed_entries(feed, source_name: str) -> List[FeedItem]:
    """Parse entries of a feedparser result into FeedItems (entries without a title are skipped)."""
    items = []
    entries = getattr(feed, 'entries', None) or []

    if not entries:
        logger.warning(f"No entries found in feed for {source_name}")
        return items

    logger.debug(f"Found {len(entries)} entries in {source_name} feed")

    for entry in entries:
        title = (entry.get('title') or '').strip()
        if not title:
            continue

        description = strip_html(entry.get('summary') or entry.get('description') or '')
        items.append(FeedItem(
            title=title,
            link=(entry.get('link') or '').strip(),
            description=description or NO_DESCRIPTION_PLACEHOLDER,
            pub_date=normalize_pub_date(entry),
            guid=entry.get('id') or entry.get('guid') or uuid.uuid4().hex[:9]
        ))

    return items


class FeedParser:
    """RSS feed fetcher backed by requests and feedparser."""

    def __init__(self, timeout: int = 10, user_agent: str = DEFAULT_USER_AGENT,
                 session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': user_agent, **REQUEST_HEADERS})

    def fetch_feed(self, source: FeedSource):
        """
        Fetch and parse a feed.

        Raises:
            SourceConnectionError: HTTP request failed
            SourceParseError: Body could not be parsed as a feed
        """
        logger.info(f"Fetching feed {source.name} from: {source.url}")
        try:
            response = self.session.get(source.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SourceConnectionError(source.name, source.url, e) from e

        feed = feedparser.parse(response.content)
        if feed.bozo:
            if not feed.entries:
                raise SourceParseError(source.name, 'feed', feed.bozo_exception)
            logger.warning(f"Feed parsing warning for {source.url}: {feed.bozo_exception}")

        return feed

    def fetch_items(self, source: FeedSource) -> List[FeedItem]:
        """Fetch one source and return its items."""
        items = parse_feed_entries(self.fetch_feed(source), source.name)
        logger.info(f"Fetched {len(items)} items from {source.name}")
        return items

    def fetch_all(self, sources: Iterable[FeedSource]) -> Tuple[List[FeedItem], List[str]]:
        """
        Fetch every source, isolating failures.

        Returns:
            Tuple of (all items in source order, names of failed sources)
        """
        all_items: List[FeedItem] = []
        failed: List[str] = []

        for source in sources:
            try:
                all_items.extend(self.fetch_items(source))
            except SourceError as e:
                logger.error(f"Error fetching RSS from {source.url}: {e.message}")
                failed.append(source.name)

        return all_items, failed

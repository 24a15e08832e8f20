#!/usr/bin/env python3
"""
Async RSS Feed Parser

Fetches all configured feeds concurrently with aiohttp, bounded by a
semaphore. A failing source is reported and never fails the batch.
"""

import asyncio
import logging
import time
from typing import List, Tuple, Iterable

import aiohttp
import feedparser

from .exceptions import SourceConnectionError, SourceParseError, SourceError
from .feed_parser import DEFAULT_USER_AGENT, REQUEST_HEADERS, parse_feed_entries
from .models import FeedItem, FeedSource

logger = logging.getLogger(__name__)


class AsyncFeedParser:
    """Async RSS feed parser with parallel fetching."""

    def __init__(self,
                 timeout: int = 10,
                 max_concurrent: int = 5,
                 user_agent: str = DEFAULT_USER_AGENT):
        """
        Initialize async feed parser.

        Args:
            timeout: Request timeout in seconds
            max_concurrent: Maximum concurrent requests
            user_agent: User-Agent header value
        """
        self.timeout = timeout
        self.max_concurrent = max_concurrent
        self.user_agent = user_agent
        self._session = None

    async def __aenter__(self):
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout),
            headers={'User-Agent': self.user_agent, **REQUEST_HEADERS}
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._session:
            await self._session.close()

    async def fetch_items(self, source: FeedSource) -> List[FeedItem]:
        """
        Fetch and parse one source.

        Raises:
            SourceConnectionError: HTTP request failed or timed out
            SourceParseError: Body could not be parsed as a feed
        """
        if not self._session:
            raise RuntimeError("AsyncFeedParser must be used as async context manager")

        logger.info(f"Fetching feed {source.name} from: {source.url}")
        try:
            async with self._session.get(source.url) as response:
                response.raise_for_status()
                content = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise SourceConnectionError(source.name, source.url, e) from e

        feed = feedparser.parse(content)
        if feed.bozo:
            if not feed.entries:
                raise SourceParseError(source.name, 'feed', feed.bozo_exception)
            logger.warning(f"Feed parsing warning for {source.url}: {feed.bozo_exception}")

        return parse_feed_entries(feed, source.name)

    async def fetch_all(self, sources: Iterable[FeedSource]) -> Tuple[List[FeedItem], List[str]]:
        """
        Fetch all sources in parallel.

        Returns:
            Tuple of (all items in source order, names of failed sources)
        """
        sources = list(sources)
        logger.info(f"Fetching {len(sources)} feeds in parallel")
        start_time = time.time()

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch_with_semaphore(source: FeedSource) -> List[FeedItem]:
            async with semaphore:
                return await self.fetch_items(source)

        results = await asyncio.gather(*(fetch_with_semaphore(s) for s in sources), return_exceptions=True)

        all_items: List[FeedItem] = []
        failed: List[str] = []
        for source, result in zip(sources, results):
            if isinstance(result, SourceError):
                logger.error(f"Error fetching RSS from {source.url}: {result.message}")
                failed.append(source.name)
            elif isinstance(result, Exception):
                logger.error(f"Unexpected error fetching RSS from {source.url}: {result}")
                failed.append(source.name)
            else:
                all_items.extend(result)

        duration = time.time() - start_time
        logger.info(f"Fetched {len(sources) - len(failed)}/{len(sources)} feeds in {duration:.2f}s")
        return all_items, failed


def fetch_feeds_sync(sources: Iterable[FeedSource], timeout: int = 10, max_concurrent: int = 5,
                     user_agent: str = DEFAULT_USER_AGENT) -> Tuple[List[FeedItem], List[str]]:
    """Run the async fetch from synchronous code."""
    async def _run():
        async with AsyncFeedParser(timeout, max_concurrent, user_agent) as parser:
            return await parser.fetch_all(sources)

    return asyncio.run(_run())

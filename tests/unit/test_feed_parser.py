import asyncio

import feedparser
import pytest
import requests

from core.async_feed_parser import AsyncFeedParser
from core.exceptions import SourceConnectionError
from core.feed_parser import FeedParser, parse_feed_entries
from core.models import FeedSource, NO_DESCRIPTION_PLACEHOLDER

RSS_XML = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>ynet</title>
    <link>https://www.ynet.co.il</link>
    <item>
      <title>נשמעה אזעקה בחיפה</title>
      <link>https://www.ynet.co.il/news/article/1</link>
      <description><![CDATA[<p>נשמעה <b>אזעקה</b> בחיפה ובקריות</p>]]></description>
      <pubDate>Mon, 06 Sep 2021 16:45:00 +0300</pubDate>
      <guid>ynet-1</guid>
    </item>
    <item>
      <title>פיגוע דקירה בירושלים</title>
      <link>https://www.ynet.co.il/news/article/2</link>
    </item>
    <item>
      <link>https://www.ynet.co.il/news/article/3</link>
      <description>ללא כותרת</description>
    </item>
  </channel>
</rss>
"""


def test_parse_feed_entries():
    items = parse_feed_entries(feedparser.parse(RSS_XML), "ynet")

    assert [item.title for item in items] == ["נשמעה אזעקה בחיפה", "פיגוע דקירה בירושלים"]

    first, second = items
    assert first.link == "https://www.ynet.co.il/news/article/1"
    assert first.description == "נשמעה אזעקה בחיפה ובקריות"
    assert first.pub_date == "2021-09-06T13:45:00+00:00"
    assert first.guid == "ynet-1"

    assert second.description == NO_DESCRIPTION_PLACEHOLDER
    assert second.pub_date
    assert len(second.guid) == 9


def test_fetch_all_isolates_failing_sources(fake_session_factory, fake_response_factory):
    session = fake_session_factory(responses={
        "https://good.example/rss": fake_response_factory(200, RSS_XML.encode("utf-8")),
        "https://down.example/rss": requests.ConnectionError("connection refused"),
        "https://missing.example/rss": fake_response_factory(404),
    })
    parser = FeedParser(session=session)
    sources = [
        FeedSource("down", "https://down.example/rss"),
        FeedSource("good", "https://good.example/rss"),
        FeedSource("missing", "https://missing.example/rss"),
    ]

    items, failed = parser.fetch_all(sources)

    assert len(items) == 2
    assert failed == ["down", "missing"]


def test_fetch_feed_raises_source_error(fake_session_factory):
    session = fake_session_factory(responses={"https://down.example/rss": requests.Timeout("timed out")})
    parser = FeedParser(session=session)

    with pytest.raises(SourceConnectionError) as exc_info:
        parser.fetch_feed(FeedSource("down", "https://down.example/rss"))

    assert exc_info.value.context["source_name"] == "down"


def test_request_headers_prefer_hebrew(fake_session_factory):
    session = fake_session_factory()

    FeedParser(session=session, user_agent="TestAgent/1.0")

    assert session.headers["User-Agent"] == "TestAgent/1.0"
    assert session.headers["Accept-Language"].startswith("he-IL")


def test_async_fetch_all_reports_failures_without_failing_batch():
    good = FeedSource("good", "https://good.example/rss")
    bad = FeedSource("bad", "https://bad.example/rss")
    parser = AsyncFeedParser(max_concurrent=2)

    async def fake_fetch_items(source):
        if source is bad:
            raise SourceConnectionError(source.name, source.url, RuntimeError("refused"))
        return parse_feed_entries(feedparser.parse(RSS_XML), source.name)

    parser.fetch_items = fake_fetch_items

    items, failed = asyncio.run(parser.fetch_all([bad, good]))

    assert len(items) == 2
    assert failed == ["bad"]


def test_async_parser_requires_context_manager():
    parser = AsyncFeedParser()

    with pytest.raises(RuntimeError):
        asyncio.run(parser.fetch_items(FeedSource("x", "https://x.example/rss")))

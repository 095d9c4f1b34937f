"""Shared fixtures for feed aggregator tests."""

import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest
from loguru import logger as _logger

from feed_aggregator.config import set_config
from feed_aggregator.core.adapters import ParsedEntry, ParsedFeed
from feed_aggregator.exceptions import FeedTransportError

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

ATOM_FEED = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Example Blog</title>
  <link href="https://blog.example.org/"/>
  <id>urn:uuid:60a76c80-d399-11d9-b93c-0003939e0af6</id>
  <updated>2024-05-03T10:00:00Z</updated>
  <author><name>Ada Lovelace</name></author>
  <entry>
    <title>Second post</title>
    <link href="https://blog.example.org/2"/>
    <id>https://blog.example.org/2</id>
    <published>2024-05-03T10:00:00Z</published>
    <updated>2024-05-03T10:00:00Z</updated>
    <author>
      <name>Charles Babbage</name>
      <uri>https://babbage.example.org/</uri>
    </author>
    <content type="html">&lt;p&gt;Body text&lt;/p&gt;</content>
  </entry>
  <entry>
    <title>First post</title>
    <link href="https://blog.example.org/1"/>
    <id>https://blog.example.org/1</id>
    <updated>2024-05-01T09:30:00Z</updated>
    <summary>Short summary</summary>
  </entry>
</feed>
"""

RSS_FEED = """<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0">
  <channel>
    <title>Example News</title>
    <link>https://news.example.com/</link>
    <description>News from example.com</description>
    <item>
      <title>Item A</title>
      <link>https://news.example.com/a</link>
      <guid isPermaLink="false">news-a</guid>
      <pubDate>Mon, 06 May 2024 08:00:00 GMT</pubDate>
      <description>Item A summary</description>
    </item>
    <item>
      <title>Item B</title>
      <link>https://news.example.com/b</link>
      <pubDate>Sun, 05 May 2024 08:00:00 GMT</pubDate>
      <description>Item B summary</description>
    </item>
  </channel>
</rss>
"""


def days_ago(days: float) -> datetime:
    return NOW - timedelta(days=days)


def make_entry(
    entry_id: str,
    days: Optional[float] = 0,
    author: Optional[str] = None,
    author_url: Optional[str] = None,
    content: Optional[str] = None,
    summary: Optional[str] = None,
) -> ParsedEntry:
    """Build a parsed entry published ``days`` days before NOW."""
    return ParsedEntry(
        entry_id=entry_id,
        url=f"https://example.com/posts/{entry_id}",
        title=f"Post {entry_id}",
        author=author,
        author_url=author_url,
        content=content,
        summary=summary,
        published=days_ago(days) if days is not None else None,
    )


def make_feed(
    *entries: ParsedEntry,
    author: Optional[str] = None,
    url: Optional[str] = "https://example.com/",
) -> ParsedFeed:
    return ParsedFeed(url=url, author=author, entries=tuple(entries), format="atom10")


class FakeTransport:
    """Transport serving prepared documents by URL.

    Unknown URLs fail like an unreachable host. A document may also be an
    exception instance, which is raised, or a ``(document, delay)`` tuple.
    """

    def __init__(self, documents: dict[str, Any]):
        self.documents = documents
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def fetch(self, url: str) -> Any:
        with self._lock:
            self.calls.append(url)
        document = self.documents.get(url)
        if document is None:
            raise FeedTransportError(url, "Request error: unreachable host")
        if isinstance(document, tuple):
            document, delay = document
            time.sleep(delay)
        if isinstance(document, Exception):
            raise document
        return document


@pytest.fixture(autouse=True)
def fresh_config():
    """Rebuild the global configuration for every test."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test."""
    records: list[dict] = []
    handler_id = _logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    _logger.remove(handler_id)


def messages(records: list[dict], level: str = "WARNING") -> list[str]:
    return [record["message"] for record in records if record["level"].name == level]

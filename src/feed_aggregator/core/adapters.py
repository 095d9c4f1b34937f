"""
Per-format adapters from feedparser output to ParsedFeed.

feedparser normalizes most fields, but feeds differ in where the author of the
feed lives. Atom feeds name it in ``<author><name>`` and give per-entry author
homepages in ``<author><uri>``; RSS channels have no author, so the channel
title stands in for it and entries carry no author URL.
"""

import hashlib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional


@dataclass(frozen=True)
class ParsedEntry:
    """Entry fields extracted by a format adapter."""

    entry_id: str
    url: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    author_url: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    published: Optional[datetime] = None


@dataclass(frozen=True)
class ParsedFeed:
    """Feed header fields plus entries, in feed order."""

    url: Optional[str]
    author: Optional[str]
    entries: tuple[ParsedEntry, ...] = field(default_factory=tuple)
    format: str = ""


class FeedAdapter(ABC):
    """Maps one feed format onto ParsedFeed."""

    # feedparser version prefixes handled by this adapter
    formats: tuple[str, ...] = ()

    def handles(self, version: str) -> bool:
        return bool(version) and version.startswith(self.formats)

    def adapt(self, parsed: Any) -> ParsedFeed:
        """Convert a feedparser result.

        Args:
            parsed: FeedParserDict returned by feedparser.parse

        Returns:
            ParsedFeed with header fields and adapted entries
        """
        header = parsed.get("feed", {})
        return ParsedFeed(
            url=clean_text(self.feed_url(header)),
            author=clean_text(self.feed_author(header)),
            entries=tuple(self.adapt_entry(entry) for entry in parsed.get("entries", [])),
            format=parsed.get("version", ""),
        )

    def adapt_entry(self, entry: Any) -> ParsedEntry:
        url = clean_text(entry.get("link"))
        title = clean_text(entry.get("title"))
        return ParsedEntry(
            entry_id=first_non_empty([entry.get("id"), url]) or fallback_entry_id(title, url),
            url=url,
            title=title,
            author=clean_text(entry.get("author")),
            author_url=clean_text(self.entry_author_url(entry)),
            content=_first_content(entry),
            summary=entry.get("summary") or None,
            published=parse_timestamp(entry),
        )

    @abstractmethod
    def feed_author(self, header: Any) -> Optional[str]:
        """Author reported for the whole feed."""

    @abstractmethod
    def feed_url(self, header: Any) -> Optional[str]:
        """URL reported for the whole feed."""

    @abstractmethod
    def entry_author_url(self, entry: Any) -> Optional[str]:
        """Author URL reported by a single entry."""


class AtomAdapter(FeedAdapter):
    """Atom 0.3 / 1.0 feeds."""

    formats = ("atom",)

    def feed_author(self, header: Any) -> Optional[str]:
        detail = header.get("author_detail") or {}
        return detail.get("name") or header.get("author")

    def feed_url(self, header: Any) -> Optional[str]:
        return header.get("link")

    def entry_author_url(self, entry: Any) -> Optional[str]:
        detail = entry.get("author_detail") or {}
        return detail.get("href")


class RssAdapter(FeedAdapter):
    """RSS 0.9x, 1.0 (RDF) and 2.0 feeds."""

    formats = ("rss",)

    def feed_author(self, header: Any) -> Optional[str]:
        return header.get("title")

    def feed_url(self, header: Any) -> Optional[str]:
        return header.get("link")

    def entry_author_url(self, entry: Any) -> Optional[str]:
        return None


ADAPTERS: tuple[FeedAdapter, ...] = (AtomAdapter(), RssAdapter())


def select_adapter(version: str) -> Optional[FeedAdapter]:
    """Return the adapter for a feedparser version string, if any."""
    for adapter in ADAPTERS:
        if adapter.handles(version):
            return adapter
    return None


def clean_text(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = str(value).strip()
    return value or None


def first_non_empty(values: Iterable[Optional[str]]) -> Optional[str]:
    for value in values:
        value = clean_text(value)
        if value:
            return value
    return None


def fallback_entry_id(title: Optional[str], url: Optional[str]) -> str:
    """Stable id for entries that carry neither an id nor a link."""
    text = f"{title or ''}|{url or ''}".encode("utf-8", "ignore")
    digest = hashlib.sha256(text).hexdigest()[:16]
    return f"entry-{digest}"


def parse_timestamp(entry: Any) -> Optional[datetime]:
    """Publish time as an aware UTC datetime, falling back to the update time."""
    for key in ("published_parsed", "updated_parsed"):
        struct = entry.get(key)
        if struct:
            try:
                return datetime(*struct[:6], tzinfo=timezone.utc)
            except (ValueError, TypeError):
                continue
    return None


def _first_content(entry: Any) -> Optional[str]:
    for item in entry.get("content") or []:
        value = item.get("value")
        if value:
            return value
    return None

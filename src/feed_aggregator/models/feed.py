"""
Feed and entry records produced by the fetcher.

Records are frozen: author resolution builds new ``ResolvedEntry`` values
instead of rewriting what the transport returned.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class RawEntry:
    """A single entry as reported by its feed."""

    id: str
    url: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    author_url: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    published_at: Optional[datetime] = None


@dataclass(frozen=True)
class RawFeed:
    """A fetched feed: its reported author, url and entries in feed order."""

    url: Optional[str]
    author: Optional[str]
    entries: tuple[RawEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ResolvedEntry:
    """An entry whose author and author URL went through the fallback chain."""

    entry: RawEntry
    author: str
    author_url: Optional[str]

    @property
    def id(self) -> str:
        return self.entry.id

    @property
    def published_at(self) -> Optional[datetime]:
        return self.entry.published_at

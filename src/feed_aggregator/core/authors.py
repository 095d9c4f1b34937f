"""
Author resolution and the deduplicating author roster.

Authors are resolved through fallback chains, highest precedence first:

    feed author:      source override -> feed author -> first entry author -> sentinel
    feed author url:  source override -> feed url
    entry author:     source override -> entry author -> feed author
    entry author url: source override -> entry author url -> feed author url

A candidate counts only if it is a non-blank string.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence

from feed_aggregator.models import AuthorRecord, FeedSourceSpec, RawEntry, RawFeed, ResolvedEntry

UNAVAILABLE_AUTHOR = "Author Unavailable"


@dataclass(frozen=True)
class FeedAuthor:
    """Author identity resolved for a whole feed."""

    name: str
    url: Optional[str]


def first_present(*candidates: Optional[str]) -> Optional[str]:
    """Return the first non-blank candidate, stripped."""
    for candidate in candidates:
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def resolve_feed_author(spec: FeedSourceSpec, feed: RawFeed, entries: Sequence[RawEntry]) -> FeedAuthor:
    """Resolve the feed-level author name and URL.

    Args:
        spec: Source spec, possibly carrying overrides
        feed: Fetched feed
        entries: Bounded entries of the feed

    Returns:
        FeedAuthor whose name is never empty
    """
    first_entry_author = entries[0].author if entries else None
    name = first_present(spec.author_override, feed.author, first_entry_author) or UNAVAILABLE_AUTHOR
    url = first_present(spec.author_url_override, feed.url)
    return FeedAuthor(name=name, url=url)


def resolve_entries(
    spec: FeedSourceSpec, feed: RawFeed, entries: Sequence[RawEntry]
) -> tuple[ResolvedEntry, ...]:
    """Resolve author and author URL for each bounded entry."""
    feed_author = resolve_feed_author(spec, feed, entries)
    return tuple(
        ResolvedEntry(
            entry=entry,
            author=first_present(spec.author_override, entry.author) or feed_author.name,
            author_url=first_present(spec.author_url_override, entry.author_url) or feed_author.url,
        )
        for entry in entries
    )


class AuthorRoster:
    """Set of AuthorRecords keyed by (last name, first name, url)."""

    def __init__(self, records: Iterable[AuthorRecord] = ()):
        self._records: dict[tuple, AuthorRecord] = {}
        for record in records:
            self.add(record)

    def add(self, record: AuthorRecord) -> None:
        self._records.setdefault(record.key, record)

    def add_entry(self, resolved: ResolvedEntry) -> AuthorRecord:
        """Record the author of a resolved entry and return its record."""
        record = AuthorRecord.from_display_name(resolved.author, resolved.author_url)
        self.add(record)
        return record

    def update(self, other: "AuthorRoster") -> None:
        for record in other:
            self.add(record)

    def sorted(self) -> tuple[AuthorRecord, ...]:
        """Records ordered by (last name, first name); ties keep insertion order."""
        return tuple(sorted(self._records.values(), key=lambda record: record.sort_key))

    def __iter__(self) -> Iterator[AuthorRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record: object) -> bool:
        return isinstance(record, AuthorRecord) and record.key in self._records

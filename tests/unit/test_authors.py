"""Unit tests for author resolution and the author roster."""

import pytest

from feed_aggregator.core.authors import (
    UNAVAILABLE_AUTHOR,
    AuthorRoster,
    first_present,
    resolve_entries,
    resolve_feed_author,
)
from feed_aggregator.models import AuthorRecord, FeedSourceSpec, RawEntry, RawFeed, ResolvedEntry

SPEC = FeedSourceSpec(url="https://example.com/feed")
OVERRIDE_SPEC = FeedSourceSpec(
    url="https://example.com/feed",
    author_override="Jane Q Public",
    author_url_override="https://jane.example.com",
)


def entry(entry_id: str, author=None, author_url=None) -> RawEntry:
    return RawEntry(id=entry_id, author=author, author_url=author_url)


class TestFirstPresent:
    """Tests for the fallback helper."""

    def test_skips_blank(self):
        """Test that None and blank strings are skipped."""
        assert first_present(None, "", "  ", "x") == "x"

    def test_none_when_nothing(self):
        """Test that no candidate yields None."""
        assert first_present(None, " ") is None


class TestResolveFeedAuthor:
    """Tests for the feed-level chain."""

    def test_override_wins(self):
        """Test that the source override beats the feed author."""
        feed = RawFeed(url="https://feed.example.com", author="Feed Author")

        resolved = resolve_feed_author(OVERRIDE_SPEC, feed, [entry("a", author="Entry Author")])

        assert resolved.name == "Jane Q Public"
        assert resolved.url == "https://jane.example.com"

    def test_feed_author(self):
        """Test that the feed author beats the first entry author."""
        feed = RawFeed(url="https://feed.example.com", author="Feed Author")

        resolved = resolve_feed_author(SPEC, feed, [entry("a", author="Entry Author")])

        assert resolved.name == "Feed Author"
        assert resolved.url == "https://feed.example.com"

    def test_first_entry_author(self):
        """Test that the first bounded entry supplies the author when the feed has none."""
        feed = RawFeed(url=None, author=None)

        resolved = resolve_feed_author(
            SPEC, feed, [entry("a", author="First Entry"), entry("b", author="Second")]
        )

        assert resolved.name == "First Entry"
        assert resolved.url is None

    def test_sentinel(self):
        """Test the sentinel when no author exists anywhere."""
        feed = RawFeed(url=None, author=None)

        resolved = resolve_feed_author(SPEC, feed, [entry("a"), entry("b", author="Later")])

        assert resolved.name == UNAVAILABLE_AUTHOR


class TestResolveEntries:
    """Tests for the per-entry chain."""

    def test_override_applies_to_every_entry(self):
        """Test that an override replaces every entry author and url."""
        feed = RawFeed(url="https://feed.example.com", author="Feed Author")
        entries = [
            entry("a", author="Alice Smith", author_url="https://alice"),
            entry("b", author="Bob Jones"),
            entry("c"),
        ]

        resolved = resolve_entries(OVERRIDE_SPEC, feed, entries)

        assert {item.author for item in resolved} == {"Jane Q Public"}
        assert {item.author_url for item in resolved} == {"https://jane.example.com"}

    def test_entry_values_then_feed_values(self):
        """Test entry author first, feed-level values as fallback."""
        feed = RawFeed(url="https://feed.example.com", author="Feed Author")
        entries = [entry("a", author="Alice Smith", author_url="https://alice"), entry("b")]

        first, second = resolve_entries(SPEC, feed, entries)

        assert (first.author, first.author_url) == ("Alice Smith", "https://alice")
        assert (second.author, second.author_url) == ("Feed Author", "https://feed.example.com")

    def test_author_url_override_only(self):
        """Test that the URL override does not affect the author name."""
        spec = FeedSourceSpec(url=SPEC.url, author_url_override="https://team")
        feed = RawFeed(url="https://feed.example.com", author=None)

        (resolved,) = resolve_entries(spec, feed, [entry("a", author="Alice Smith", author_url="https://alice")])

        assert resolved.author == "Alice Smith"
        assert resolved.author_url == "https://team"

    def test_sentinel_for_entries_without_authors(self):
        """Test that entries fall back to the sentinel feed author."""
        feed = RawFeed(url=None, author=None)

        resolved = resolve_entries(SPEC, feed, [entry("a"), entry("b")])

        assert all(item.author == UNAVAILABLE_AUTHOR for item in resolved)

    def test_raw_entries_untouched(self):
        """Test that resolution does not modify raw entries."""
        raw = entry("a")
        feed = RawFeed(url="https://feed.example.com", author="Feed Author", entries=(raw,))

        (resolved,) = resolve_entries(OVERRIDE_SPEC, feed, [raw])

        assert raw.author is None
        assert feed.author == "Feed Author"
        assert resolved.entry is raw


class TestAuthorRecord:
    """Tests for display name splitting."""

    @pytest.mark.parametrize(
        "name, first, last",
        [
            ("Jane Q Public", "Jane", "Q Public"),
            ("Ada Lovelace", "Ada", "Lovelace"),
            ("Plato", "Plato", ""),
            ("  Grace   Brewster  Hopper ", "Grace", "Brewster Hopper"),
            (UNAVAILABLE_AUTHOR, "Author", "Unavailable"),
        ],
    )
    def test_from_display_name(self, name, first, last):
        """Test splitting on the first whitespace run."""
        record = AuthorRecord.from_display_name(name, "https://x")

        assert (record.first_name, record.last_name, record.url) == (first, last, "https://x")


class TestAuthorRoster:
    """Tests for AuthorRoster."""

    def test_identical_records_collapse(self):
        """Test set semantics on (last, first, url)."""
        roster = AuthorRoster()
        roster.add(AuthorRecord(first_name="Ada", last_name="Lovelace", url="https://a"))
        roster.add(AuthorRecord(first_name="Ada", last_name="Lovelace", url="https://a"))
        roster.add(AuthorRecord(first_name="Ada", last_name="Lovelace", url="https://b"))

        assert len(roster) == 2

    def test_add_entry(self):
        """Test recording the author of a resolved entry."""
        roster = AuthorRoster()
        resolved = ResolvedEntry(entry=entry("a"), author="Jane Q Public", author_url="https://jane")

        record = roster.add_entry(resolved)
        roster.add_entry(ResolvedEntry(entry=entry("b"), author="Jane Q Public", author_url="https://jane"))

        assert record == AuthorRecord(first_name="Jane", last_name="Q Public", url="https://jane")
        assert list(roster) == [record]
        assert record in roster

    def test_sorted_by_last_then_first(self):
        """Test roster ordering."""
        roster = AuthorRoster(
            [
                AuthorRecord(first_name="Zed", last_name="Adams"),
                AuthorRecord(first_name="Bob", last_name="Smith"),
                AuthorRecord(first_name="Amy", last_name="Smith"),
                AuthorRecord(first_name="Cher", last_name=""),
            ]
        )

        assert [(record.last_name, record.first_name) for record in roster.sorted()] == [
            ("", "Cher"),
            ("Adams", "Zed"),
            ("Smith", "Amy"),
            ("Smith", "Bob"),
        ]

    def test_update(self):
        """Test merging rosters."""
        first = AuthorRoster([AuthorRecord(first_name="Ada", last_name="Lovelace")])
        second = AuthorRoster(
            [
                AuthorRecord(first_name="Ada", last_name="Lovelace"),
                AuthorRecord(first_name="Alan", last_name="Turing"),
            ]
        )

        first.update(second)

        assert len(first) == 2

"""
Aggregate builder: merged entries and author roster to an AggregateResult.
"""

from typing import Optional, Sequence

from feed_aggregator.core.authors import AuthorRoster
from feed_aggregator.core.dates import DateFormatter, format_date
from feed_aggregator.models import AggregatePost, AggregateResult, ResolvedEntry


def build_post(
    resolved: ResolvedEntry,
    date_format: Optional[str] = None,
    formatter: DateFormatter = format_date,
) -> AggregatePost:
    """Map a resolved entry to a post; content falls back to the summary."""
    entry = resolved.entry
    published = entry.published_at
    return AggregatePost(
        id=entry.id,
        url=entry.url,
        title=entry.title,
        author=resolved.author,
        author_url=resolved.author_url,
        content=entry.content or entry.summary,
        published_at=published,
        formatted_date=formatter(published, date_format) if published else "",
        comments_enabled=False,
    )


def build_aggregate(
    title: str,
    entries: Sequence[ResolvedEntry],
    roster: AuthorRoster,
    date_format: Optional[str] = None,
    formatter: DateFormatter = format_date,
) -> AggregateResult:
    """Assemble the final result.

    Args:
        title: Aggregate title
        entries: Merged entries, already deduplicated and sorted
        roster: Authors collected from all feeds
        date_format: Site date format handed to the formatter
        formatter: Date formatting function

    Returns:
        AggregateResult with sorted authors and posts in entry order
    """
    return AggregateResult(
        title=title,
        authors=roster.sorted(),
        posts=tuple(build_post(entry, date_format, formatter) for entry in entries),
    )

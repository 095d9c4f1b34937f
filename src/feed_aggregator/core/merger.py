"""
Merger: combine every feed's entries, drop duplicate ids, sort newest first.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Sequence

from feed_aggregator.logger import get_logger
from feed_aggregator.models import ResolvedEntry

logger = get_logger(__name__)

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class MergeResult:
    """Merged entries plus what was dropped on the way."""

    entries: list[ResolvedEntry] = field(default_factory=list)
    duplicates_dropped: int = 0


def merge_entries(contributions: Iterable[Sequence[ResolvedEntry]]) -> MergeResult:
    """Merge per-feed entry lists.

    Entries are concatenated in contribution order. When two entries share an
    id, the first one encountered is kept, even across different feeds. The
    result is sorted by publish time, newest first; the sort is stable and
    undated entries go last.

    Args:
        contributions: Resolved entries of each feed, in source order

    Returns:
        MergeResult with the sorted, deduplicated entries
    """
    result = MergeResult()
    seen: set[str] = set()

    for entries in contributions:
        for entry in entries:
            if entry.id in seen:
                logger.debug(f"Dropping duplicate entry id: {entry.id}")
                result.duplicates_dropped += 1
                continue
            seen.add(entry.id)
            result.entries.append(entry)

    result.entries.sort(key=_recency_key, reverse=True)
    return result


def _recency_key(entry: ResolvedEntry) -> tuple[bool, datetime]:
    published = entry.published_at
    if published is None:
        return (False, _OLDEST)
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return (True, published)

"""
Entry extractor: bound a feed's entries to the page's post limit.
"""

from typing import Union

from feed_aggregator.core.fetcher import SkipReason, SkipSignal
from feed_aggregator.logger import get_logger
from feed_aggregator.models import RawEntry, RawFeed

logger = get_logger(__name__)


def extract_entries(feed: RawFeed, post_limit: int, url: str = "") -> Union[tuple[RawEntry, ...], SkipSignal]:
    """Take the first post_limit entries in feed order.

    Feeds are expected to list their newest entries first, so no sorting
    happens here.

    Args:
        feed: Fetched feed
        post_limit: Maximum number of entries to keep
        url: Source URL, used in the skip signal

    Returns:
        Tuple of bounded entries, or a NO_ENTRIES SkipSignal when empty
    """
    bounded = feed.entries[: max(post_limit, 0)]
    if not bounded:
        # An empty feed is not an error
        logger.debug(f"No entries to take from {url or feed.url}")
        return SkipSignal(url or feed.url or "", SkipReason.NO_ENTRIES, "Feed has no entries")
    return bounded

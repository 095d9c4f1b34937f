"""Data models for feed aggregator."""

from feed_aggregator.models.aggregate import AggregatePost, AggregateResult, AuthorRecord
from feed_aggregator.models.feed import RawEntry, RawFeed, ResolvedEntry
from feed_aggregator.models.source import AggregatorParams, FeedSourceSpec

__all__ = [
    "FeedSourceSpec",
    "AggregatorParams",
    "RawFeed",
    "RawEntry",
    "ResolvedEntry",
    "AuthorRecord",
    "AggregatePost",
    "AggregateResult",
]

"""Core aggregation pipeline.

Normalizer -> (per source) Fetcher -> Extractor -> Author Resolver
-> Merger -> Builder, orchestrated by FeedAggregator.

Usage:
    from feed_aggregator.core import create_aggregator

    aggregator = create_aggregator()
    result = aggregator.compile(page_options)
"""

from feed_aggregator.core.aggregator import (
    AggregationStats,
    FeedAggregator,
    SourceContribution,
    create_aggregator,
)
from feed_aggregator.core.authors import UNAVAILABLE_AUTHOR, AuthorRoster, resolve_entries
from feed_aggregator.core.builder import build_aggregate
from feed_aggregator.core.dates import format_date
from feed_aggregator.core.extractor import extract_entries
from feed_aggregator.core.fetcher import (
    FeedFetcher,
    FetchStats,
    SkipReason,
    SkipSignal,
    create_fetcher,
)
from feed_aggregator.core.merger import MergeResult, merge_entries
from feed_aggregator.core.normalizer import normalize_sources
from feed_aggregator.core.transport import FeedDocument, HttpFeedTransport

__all__ = [
    # Orchestration
    "FeedAggregator",
    "create_aggregator",
    "SourceContribution",
    "AggregationStats",
    # Pipeline stages
    "normalize_sources",
    "FeedFetcher",
    "create_fetcher",
    "extract_entries",
    "resolve_entries",
    "AuthorRoster",
    "merge_entries",
    "build_aggregate",
    "format_date",
    # Transport
    "FeedDocument",
    "HttpFeedTransport",
    # Result types
    "FetchStats",
    "MergeResult",
    "SkipReason",
    "SkipSignal",
    "UNAVAILABLE_AUTHOR",
]

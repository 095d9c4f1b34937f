"""
Feed aggregator: runs the per-source pipeline on a thread pool and assembles
the aggregate.

Each source goes through fetch -> extract -> resolve authors in its own task
and produces a ``SourceContribution``. The calling thread is the only one
that collects contributions; it stores them by source index, so merging
happens in configuration order whatever order the tasks finish in.
"""

import threading
import time
from collections.abc import Mapping
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Optional

from feed_aggregator.config import get_config
from feed_aggregator.core.authors import AuthorRoster, resolve_entries
from feed_aggregator.core.builder import build_aggregate
from feed_aggregator.core.dates import DateFormatter, format_date
from feed_aggregator.core.extractor import extract_entries
from feed_aggregator.core.fetcher import FeedFetcher, SkipReason, SkipSignal, create_fetcher
from feed_aggregator.core.merger import merge_entries
from feed_aggregator.core.normalizer import normalize_sources
from feed_aggregator.exceptions import AggregationCancelled
from feed_aggregator.logger import feed_context, get_logger
from feed_aggregator.models import AggregateResult, AggregatorParams, FeedSourceSpec, ResolvedEntry

logger = get_logger(__name__)

# How often the collector checks the cancel event while waiting on tasks
CANCEL_POLL_SECONDS = 0.1


@dataclass
class SourceContribution:
    """What one source adds to the aggregate."""

    spec: FeedSourceSpec
    entries: tuple[ResolvedEntry, ...] = ()
    roster: AuthorRoster = field(default_factory=AuthorRoster)
    skip: Optional[SkipSignal] = None

    @property
    def included(self) -> bool:
        return self.skip is None


@dataclass
class AggregationStats:
    """Statistics for one aggregation run."""

    sources_total: int = 0
    sources_aggregated: int = 0
    skips_by_reason: dict = field(default_factory=dict)
    entries_collected: int = 0
    duplicates_dropped: int = 0
    posts: int = 0
    elapsed_seconds: float = 0.0

    def add_contribution(self, contribution: SourceContribution) -> None:
        self.sources_total += 1
        if contribution.skip is not None:
            key = contribution.skip.reason.value
            self.skips_by_reason[key] = self.skips_by_reason.get(key, 0) + 1
        else:
            self.sources_aggregated += 1
            self.entries_collected += len(contribution.entries)


class FeedAggregator:
    """Compile a set of feeds into one aggregate."""

    def __init__(
        self,
        fetcher: Optional[FeedFetcher] = None,
        max_workers: Optional[int] = None,
        date_format: Optional[str] = None,
        formatter: DateFormatter = format_date,
    ):
        """Initialize feed aggregator.

        Args:
            fetcher: Fetcher shared by all source tasks
            max_workers: Maximum number of concurrent fetches
            date_format: Site date format for formatted post dates
            formatter: Date formatting function
        """
        config = get_config().aggregator

        self.fetcher = fetcher or create_fetcher()
        self.max_workers = max_workers or config.max_workers
        self.date_format = date_format if date_format is not None else config.date_format
        self.formatter = formatter
        self.stats = AggregationStats()

    def compile(
        self,
        options: Mapping[str, Any],
        cancel_event: Optional[threading.Event] = None,
    ) -> AggregateResult:
        """Normalize page options and aggregate their feeds.

        Raises:
            ConfigurationError: If the options are malformed
            AggregationCancelled: If cancel_event is set before completion
        """
        return self.aggregate(normalize_sources(options), cancel_event=cancel_event)

    def aggregate(
        self,
        params: AggregatorParams,
        cancel_event: Optional[threading.Event] = None,
    ) -> AggregateResult:
        """Fetch every source and build the aggregate.

        A source that fails is left out; the run still succeeds, with empty
        posts if no source could be used.

        Args:
            params: Normalized aggregation parameters
            cancel_event: Set it from another thread to abandon the run

        Returns:
            AggregateResult with deduplicated, newest-first posts

        Raises:
            AggregationCancelled: If cancel_event is set before completion
        """
        start_time = time.time()
        contributions = self._collect(params, cancel_event)

        stats = AggregationStats()
        roster = AuthorRoster()
        for contribution in contributions:
            stats.add_contribution(contribution)
            roster.update(contribution.roster)

        merged = merge_entries(contribution.entries for contribution in contributions)
        result = build_aggregate(
            params.title,
            merged.entries,
            roster,
            date_format=self.date_format,
            formatter=self.formatter,
        )

        stats.duplicates_dropped = merged.duplicates_dropped
        stats.posts = len(result.posts)
        stats.elapsed_seconds = time.time() - start_time
        self.stats = stats

        logger.info(
            f"Aggregated {stats.posts} posts by {len(result.authors)} authors "
            f"from {stats.sources_aggregated}/{stats.sources_total} feeds "
            f"in {stats.elapsed_seconds:.2f}s"
        )
        return result

    def process_source(self, spec: FeedSourceSpec, post_limit: int) -> SourceContribution:
        """Fetch, bound and resolve one source.

        Args:
            spec: Source to process
            post_limit: Maximum entries to take from the feed

        Returns:
            SourceContribution, with skip set if the source was skipped
        """
        outcome = self.fetcher.fetch(spec)
        if isinstance(outcome, SkipSignal):
            return SourceContribution(spec=spec, skip=outcome)

        bounded = extract_entries(outcome, post_limit, spec.url)
        if isinstance(bounded, SkipSignal):
            return SourceContribution(spec=spec, skip=bounded)

        resolved = resolve_entries(spec, outcome, bounded)
        roster = AuthorRoster()
        for entry in resolved:
            roster.add_entry(entry)
        return SourceContribution(spec=spec, entries=resolved, roster=roster)

    def _process_safely(self, spec: FeedSourceSpec, post_limit: int) -> SourceContribution:
        with feed_context(spec.url):
            try:
                return self.process_source(spec, post_limit)
            except Exception as e:
                logger.exception(f"Unexpected error processing {spec.url}: {e}")
                return SourceContribution(
                    spec=spec,
                    skip=SkipSignal(
                        spec.url,
                        SkipReason.FETCH_FAILED,
                        f"Unexpected error: {type(e).__name__}: {str(e)}",
                    ),
                )

    def _collect(
        self,
        params: AggregatorParams,
        cancel_event: Optional[threading.Event],
    ) -> list[SourceContribution]:
        sources = params.sources
        if not sources:
            logger.info("No feeds configured")
            return []

        results: list[Optional[SourceContribution]] = [None] * len(sources)
        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(sources)),
            thread_name_prefix="feed-fetch",
        )
        finished = False
        try:
            futures: dict[Future, int] = {
                executor.submit(self._process_safely, spec, params.post_limit): index
                for index, spec in enumerate(sources)
            }
            pending = set(futures)
            while pending:
                _raise_if_cancelled(cancel_event)
                done, pending = wait(pending, timeout=CANCEL_POLL_SECONDS, return_when=FIRST_COMPLETED)
                for future in done:
                    results[futures[future]] = future.result()
            _raise_if_cancelled(cancel_event)
            finished = True
        finally:
            # On cancellation or error, drop queued tasks and do not wait for
            # in-flight fetches; their results are discarded.
            executor.shutdown(wait=finished, cancel_futures=not finished)

        return [result for result in results if result is not None]


def _raise_if_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        logger.warning("Aggregation cancelled, discarding in-flight results")
        raise AggregationCancelled("Aggregation cancelled by caller")


def create_aggregator(
    timeout_seconds: Optional[float] = None,
    max_workers: Optional[int] = None,
    date_format: Optional[str] = None,
) -> FeedAggregator:
    """Create a FeedAggregator with an HTTP fetcher built from configuration.

    Args:
        timeout_seconds: Override the configured request timeout
        max_workers: Override the configured worker limit
        date_format: Override the configured site date format

    Returns:
        Configured FeedAggregator instance
    """
    return FeedAggregator(
        fetcher=create_fetcher(timeout_seconds=timeout_seconds),
        max_workers=max_workers,
        date_format=date_format,
    )

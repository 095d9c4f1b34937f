"""
Feed fetcher: one source spec to a validated RawFeed or a skip signal.

Failures never leave this module as exceptions. A feed that cannot be
retrieved, cannot be parsed or does not expose the required capabilities is
reported as a ``SkipSignal`` and logged.
"""

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union
from urllib.parse import urlparse

from feed_aggregator.core.adapters import clean_text, fallback_entry_id
from feed_aggregator.core.transport import FeedTransport, HttpFeedTransport, missing_capabilities
from feed_aggregator.exceptions import FeedFetchError
from feed_aggregator.logger import get_logger
from feed_aggregator.models import FeedSourceSpec, RawEntry, RawFeed

logger = get_logger(__name__)


class SkipReason(str, Enum):
    """Why a source contributed nothing to the aggregate."""

    FETCH_FAILED = "fetch_failed"
    CAPABILITY_MISSING = "capability_missing"
    NO_ENTRIES = "no_entries"


@dataclass(frozen=True)
class SkipSignal:
    """A source was skipped; the run continues without it."""

    url: str
    reason: SkipReason
    detail: str = ""


FetchOutcome = Union[RawFeed, SkipSignal]


@dataclass
class FetchStats:
    """Statistics for feed fetching operations."""

    total_feeds: int = 0
    successful_fetches: int = 0
    failed_fetches: int = 0
    total_entries: int = 0
    total_time_seconds: float = 0.0
    skips_by_reason: dict = field(default_factory=dict)

    def add_outcome(self, outcome: FetchOutcome, elapsed_seconds: float = 0.0) -> None:
        """Add a fetch outcome to statistics.

        Args:
            outcome: RawFeed or SkipSignal returned by a fetch
            elapsed_seconds: Time spent on the fetch
        """
        self.total_feeds += 1
        self.total_time_seconds += elapsed_seconds

        if isinstance(outcome, SkipSignal):
            self.failed_fetches += 1
            key = outcome.reason.value
            self.skips_by_reason[key] = self.skips_by_reason.get(key, 0) + 1
        else:
            self.successful_fetches += 1
            self.total_entries += len(outcome.entries)

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        if self.total_feeds == 0:
            return 0.0
        return self.successful_fetches / self.total_feeds

    @property
    def avg_time_seconds(self) -> float:
        """Calculate average fetch time."""
        if self.total_feeds == 0:
            return 0.0
        return self.total_time_seconds / self.total_feeds


class FeedFetcher:
    """Fetch one feed per source spec through a transport."""

    def __init__(self, transport: Optional[FeedTransport] = None):
        """Initialize feed fetcher.

        Args:
            transport: Transport used to retrieve and parse feeds
                (an HttpFeedTransport built from configuration by default)
        """
        self.transport = transport or HttpFeedTransport()
        self.stats = FetchStats()
        self._stats_lock = threading.Lock()

    def fetch(self, spec: FeedSourceSpec) -> FetchOutcome:
        """Fetch and validate the feed for spec.

        Args:
            spec: Source spec to fetch

        Returns:
            RawFeed on success, SkipSignal with FETCH_FAILED or
            CAPABILITY_MISSING otherwise
        """
        start_time = time.time()
        outcome = self._fetch(spec)
        elapsed = time.time() - start_time

        with self._stats_lock:
            self.stats.add_outcome(outcome, elapsed)
        if isinstance(outcome, SkipSignal):
            logger.warning(outcome.detail)
        else:
            logger.debug(f"Fetched {len(outcome.entries)} entries from {spec.url} in {elapsed:.2f}s")
        return outcome

    def _fetch(self, spec: FeedSourceSpec) -> FetchOutcome:
        url = spec.url

        valid, error = self.validate_url(url)
        if not valid:
            return SkipSignal(url, SkipReason.FETCH_FAILED, f"Failed to acquire feed url {url}: {error}")

        try:
            document = self.transport.fetch(url)
        except FeedFetchError as e:
            return SkipSignal(url, SkipReason.FETCH_FAILED, f"Failed to acquire feed url {url}: {e.message}")

        missing = missing_capabilities(document)
        if missing:
            return SkipSignal(
                url,
                SkipReason.CAPABILITY_MISSING,
                f"Feed {url} does not support: {', '.join(missing)}",
            )

        return to_raw_feed(document)

    def validate_url(self, url: str) -> tuple[bool, Optional[str]]:
        """Validate a feed URL.

        Args:
            url: URL to validate

        Returns:
            Tuple of (is_valid, error_message)
        """
        try:
            result = urlparse(url)
        except ValueError as e:
            return False, f"Validation error: {str(e)}"

        if result.scheme == "file":
            if not result.path:
                return False, "Invalid URL format"
            return True, None

        if not result.scheme or not result.netloc:
            return False, "Invalid URL format"

        if result.scheme not in ("http", "https"):
            return False, f"Unsupported scheme: {result.scheme}"

        return True, None


def to_raw_feed(document: Any) -> RawFeed:
    """Copy a FeedDocument into an immutable RawFeed."""
    return RawFeed(
        url=clean_text(document.url),
        author=clean_text(document.author),
        entries=tuple(_to_raw_entry(entry) for entry in document.entries),
    )


def _to_raw_entry(entry: Any) -> RawEntry:
    url = clean_text(getattr(entry, "url", None))
    title = getattr(entry, "title", None)
    return RawEntry(
        id=clean_text(getattr(entry, "entry_id", None)) or url or fallback_entry_id(title, url),
        url=url,
        title=title,
        author=clean_text(getattr(entry, "author", None)),
        author_url=clean_text(getattr(entry, "author_url", None)),
        content=getattr(entry, "content", None),
        summary=getattr(entry, "summary", None),
        published_at=getattr(entry, "published", None),
    )


def create_fetcher(timeout_seconds: Optional[float] = None) -> FeedFetcher:
    """Create a FeedFetcher with a configured HTTP transport.

    Args:
        timeout_seconds: Override the configured request timeout

    Returns:
        Configured FeedFetcher instance
    """
    return FeedFetcher(transport=HttpFeedTransport(timeout_seconds=timeout_seconds))

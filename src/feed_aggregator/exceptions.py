"""
Exception hierarchy for feed aggregator.

Only ``ConfigurationError`` and ``AggregationCancelled`` ever reach callers of
the aggregator. Fetch errors are raised by the transport and turned into skip
signals by the fetcher.
"""


class FeedAggregatorError(Exception):
    """Base class for all feed aggregator errors."""


class ConfigurationError(FeedAggregatorError):
    """Raised when the top-level page configuration is malformed."""


class FeedFetchError(FeedAggregatorError):
    """Raised when a feed cannot be retrieved or parsed."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url
        self.message = message


class FeedTransportError(FeedFetchError):
    """Network level failure: timeout, unreachable host, HTTP error status."""


class FeedParseError(FeedFetchError):
    """The payload could not be recognized as a feed."""


class AggregationCancelled(FeedAggregatorError):
    """Raised when the caller cancels an aggregation in progress."""

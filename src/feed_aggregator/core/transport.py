"""
HTTP transport for RSS/Atom feeds.

Retrieves a feed with httpx, parses it with feedparser and hands the parsed
structure to the adapter registered for its format. Whatever a transport
returns must satisfy the ``FeedDocument`` protocol; the fetcher checks that
once, at its boundary.
"""

import time
from pathlib import Path
from typing import Any, Optional, Protocol, Sequence, runtime_checkable
from urllib.parse import urlparse
from urllib.request import url2pathname

import feedparser
import httpx

from feed_aggregator.config import get_config
from feed_aggregator.core.adapters import ParsedFeed, select_adapter
from feed_aggregator.exceptions import FeedParseError, FeedTransportError
from feed_aggregator.logger import get_logger

logger = get_logger(__name__)

REQUIRED_CAPABILITIES = ("entries", "author", "url")


@runtime_checkable
class FeedDocument(Protocol):
    """What a transport must expose for a parsed feed."""

    entries: Sequence[Any]
    author: Optional[str]
    url: Optional[str]


class FeedTransport(Protocol):
    """Anything that turns a URL into a FeedDocument or raises FeedFetchError."""

    def fetch(self, url: str) -> FeedDocument: ...


def missing_capabilities(document: Any) -> list[str]:
    """Names from REQUIRED_CAPABILITIES that document does not expose."""
    return [name for name in REQUIRED_CAPABILITIES if not hasattr(document, name)]


class HttpFeedTransport:
    """Fetch feeds over HTTP (or from file:// URLs) and adapt them by format."""

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        user_agent: Optional[str] = None,
        follow_redirects: Optional[bool] = None,
        max_redirects: Optional[int] = None,
    ):
        """Initialize the transport.

        Args:
            timeout_seconds: Request timeout in seconds
            user_agent: User-Agent header for HTTP requests
            follow_redirects: Whether to follow HTTP redirects
            max_redirects: Maximum number of redirects to follow
        """
        config = get_config().fetcher

        self.timeout_seconds = timeout_seconds or config.timeout_seconds
        self.user_agent = user_agent or config.user_agent
        self.follow_redirects = (
            config.follow_redirects if follow_redirects is None else follow_redirects
        )
        self.max_redirects = config.max_redirects if max_redirects is None else max_redirects

    def fetch(self, url: str) -> ParsedFeed:
        """Retrieve, parse and adapt the feed at url.

        Args:
            url: Feed URL (http, https or file)

        Returns:
            ParsedFeed produced by the adapter for the detected format

        Raises:
            FeedTransportError: On timeout, network error or HTTP error status
            FeedParseError: If the payload is not a feed in a supported format
        """
        start_time = time.time()
        payload = self._read(url)

        parsed = feedparser.parse(payload)
        version = parsed.get("version", "")
        if not version:
            reason = parsed.get("bozo_exception") or "unrecognized payload"
            raise FeedParseError(url, f"Not a feed: {reason}")
        if parsed.get("bozo"):
            logger.warning(f"Feed {url} reported parse issue: {parsed.get('bozo_exception')}")

        adapter = select_adapter(version)
        if adapter is None:
            raise FeedParseError(url, f"Unsupported feed format: {version}")

        document = adapter.adapt(parsed)
        logger.debug(
            f"Parsed {len(document.entries)} {version} entries from {url} "
            f"in {time.time() - start_time:.2f}s"
        )
        return document

    def _read(self, url: str) -> bytes:
        if urlparse(url).scheme == "file":
            path = Path(url2pathname(urlparse(url).path))
            try:
                return path.read_bytes()
            except OSError as e:
                raise FeedTransportError(url, f"Cannot read {path}: {e}") from e
        return self._fetch_http(url)

    def _fetch_http(self, url: str) -> bytes:
        """Fetch URL with HTTP client.

        Args:
            url: URL to fetch

        Returns:
            Response body

        Raises:
            FeedTransportError: On timeout, HTTP error or network error
        """
        headers = {"User-Agent": self.user_agent}
        # httpx timeouts apply per network operation; this bounds the whole fetch
        deadline = time.monotonic() + self.timeout_seconds

        try:
            with httpx.Client(
                timeout=self.timeout_seconds,
                follow_redirects=self.follow_redirects,
                max_redirects=self.max_redirects,
            ) as client:
                with client.stream("GET", url, headers=headers) as response:
                    response.raise_for_status()
                    chunks = []
                    for chunk in response.iter_bytes():
                        chunks.append(chunk)
                        if time.monotonic() > deadline:
                            raise FeedTransportError(
                                url, f"Timeout: no complete response within {self.timeout_seconds}s"
                            )
                    return b"".join(chunks)
        except httpx.TimeoutException as e:
            raise FeedTransportError(url, f"Timeout: {e}") from e
        except httpx.HTTPStatusError as e:
            raise FeedTransportError(url, f"HTTP {e.response.status_code}: {e}") from e
        except httpx.RequestError as e:
            raise FeedTransportError(url, f"Request error: {e}") from e
        except httpx.InvalidURL as e:
            raise FeedTransportError(url, f"Invalid URL: {e}") from e


def create_transport(timeout_seconds: Optional[float] = None) -> HttpFeedTransport:
    """Create a configured HttpFeedTransport instance."""
    return HttpFeedTransport(timeout_seconds=timeout_seconds)

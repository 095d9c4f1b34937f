"""
Source normalizer: page options to immutable aggregation parameters.

Turns the raw ``feed_aggregator`` page options (title, post_limit, feed_list,
meta_feed) into an ``AggregatorParams`` with a URL-deduplicated, ordered tuple
of ``FeedSourceSpec``. Only a malformed top level is fatal; problems with a
single feed_list item are logged and the item is skipped.
"""

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any, Optional

from pydantic import ValidationError

from feed_aggregator.config import AggregatorConfig, get_config
from feed_aggregator.exceptions import ConfigurationError
from feed_aggregator.logger import get_logger
from feed_aggregator.models import AggregatorParams, FeedSourceSpec

logger = get_logger(__name__)

# Accepted spellings for each page option, preferred first
OPTION_KEYS = {
    "title": ("title",),
    "post_limit": ("post_limit", "postLimit"),
    "feed_list": ("feed_list", "feedList"),
    "meta_feed": ("meta_feed", "metaFeed"),
}

SOURCE_KEYS = {
    "url": ("url",),
    "author": ("author",),
    "author_url": ("author_url", "authorUrl"),
}

_MISSING = object()


def normalize_sources(
    options: Mapping[str, Any],
    defaults: Optional[AggregatorConfig] = None,
) -> AggregatorParams:
    """Build aggregation parameters from page options.

    Args:
        options: Page metadata holding the aggregator options
        defaults: Defaults for title and post_limit (global config if omitted)

    Returns:
        Frozen AggregatorParams

    Raises:
        ConfigurationError: If options is not a mapping, feed_list is absent
            or not a sequence, or title/post_limit are invalid
    """
    if not isinstance(options, Mapping):
        raise ConfigurationError(
            f"Feed aggregator options must be a mapping, got {type(options).__name__}"
        )

    defaults = defaults or get_config().aggregator

    feed_list = _option(options, "feed_list")
    if feed_list is _MISSING or feed_list is None:
        raise ConfigurationError("Missing required option 'feed_list'")
    if isinstance(feed_list, (str, bytes)) or not isinstance(feed_list, Sequence):
        raise ConfigurationError(
            f"Option 'feed_list' must be a list of feeds, got {type(feed_list).__name__}"
        )

    title = _option(options, "title")
    if title is _MISSING or title is None:
        title = defaults.default_title
    elif _is_scalar(title):
        title = str(title)

    post_limit = _option(options, "post_limit")
    if post_limit is _MISSING or post_limit is None:
        post_limit = defaults.default_post_limit

    meta_feed = _option(options, "meta_feed")
    if meta_feed is _MISSING:
        meta_feed = None
    elif meta_feed is None:
        meta_feed = ""
    elif _is_scalar(meta_feed):
        meta_feed = str(meta_feed)

    sources = _dedupe(
        spec for spec in (_parse_source(item, index) for index, item in enumerate(feed_list)) if spec
    )

    try:
        return AggregatorParams(
            title=title,
            post_limit=post_limit,
            sources=tuple(sources),
            meta_feed=meta_feed,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid feed aggregator options: {e}") from e


def _option(options: Mapping[str, Any], name: str, keys: Mapping = OPTION_KEYS) -> Any:
    for key in keys[name]:
        if key in options:
            return options[key]
    return _MISSING


def _parse_source(item: Any, index: int) -> Optional[FeedSourceSpec]:
    """Parse one feed_list item; returns None for unusable items."""
    if isinstance(item, str):
        url = item.strip()
        if not url:
            logger.warning(f"Skipping empty feed url at feed_list[{index}]")
            return None
        return FeedSourceSpec(url=url)

    if not isinstance(item, Mapping):
        logger.warning(
            f"Skipping feed_list[{index}]: expected a url or a mapping, got {type(item).__name__}"
        )
        return None

    known = {key for keys in SOURCE_KEYS.values() for key in keys}
    unknown = [key for key in item if key not in known]

    url = _option(item, "url", SOURCE_KEYS)
    if not isinstance(url, str) or not url.strip():
        logger.warning(f"Skipping feed_list[{index}]: missing feed url")
        return None
    url = url.strip()

    if unknown:
        logger.warning(f"Unknown feed parameters for {url}: {unknown}")

    return FeedSourceSpec(
        url=url,
        author_override=_text(_option(item, "author", SOURCE_KEYS)),
        author_url_override=_text(_option(item, "author_url", SOURCE_KEYS)),
    )


def _is_scalar(value: Any) -> bool:
    # YAML reads `title: 2024` as an int and `title: 2024-01-01` as a date
    return isinstance(value, (int, float, date))


def _text(value: Any) -> Optional[str]:
    if value is _MISSING or value is None:
        return None
    text = str(value).strip()
    return text or None


def _dedupe(specs) -> list[FeedSourceSpec]:
    """Keep the first spec for each URL, in order."""
    seen: set[str] = set()
    unique = []
    for spec in specs:
        if spec.url in seen:
            logger.debug(f"Dropping duplicate feed url: {spec.url}")
            continue
        seen.add(spec.url)
        unique.append(spec)
    return unique

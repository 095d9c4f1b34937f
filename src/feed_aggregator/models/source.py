"""
Feed source and page parameter models.
"""

import posixpath
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_META_FEED = "atom.xml"


class FeedSourceSpec(BaseModel):
    """One configured feed, with optional author overrides."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., min_length=1, description="Feed URL")
    author_override: Optional[str] = Field(None, description="Author used for every entry")
    author_url_override: Optional[str] = Field(None, description="Author URL used for every entry")


class AggregatorParams(BaseModel):
    """Immutable parameters for one aggregation run."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Title of the aggregate")
    post_limit: int = Field(..., ge=0, description="Max entries taken from each feed")
    sources: tuple[FeedSourceSpec, ...] = Field(default_factory=tuple)
    meta_feed: Optional[str] = Field(
        None, description="Requested machine-readable feed path ('' selects the default)"
    )

    def meta_feed_path(self) -> Optional[str]:
        """Site-absolute output path of the meta feed, or None if not requested."""
        if self.meta_feed is None:
            return None

        path = self.meta_feed.strip() or DEFAULT_META_FEED
        directory, name = posixpath.split(path)
        if not name:
            name = DEFAULT_META_FEED
        directory = posixpath.normpath(directory).strip("/") if directory else ""
        if directory in ("", "."):
            return f"/{name}"
        return f"/{directory}/{name}"

"""
Aggregate result models handed to the renderer.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthorRecord(BaseModel):
    """One distinct author in the roster."""

    model_config = ConfigDict(frozen=True)

    first_name: str
    last_name: str = ""
    url: Optional[str] = None

    @classmethod
    def from_display_name(cls, name: str, url: Optional[str] = None) -> "AuthorRecord":
        """Split a display name into first token and remaining tokens.

        Args:
            name: Resolved author name, e.g. "Jane Q Public"
            url: Resolved author URL

        Returns:
            AuthorRecord with first_name "Jane" and last_name "Q Public"
        """
        parts = name.split()
        first = parts[0] if parts else ""
        return cls(first_name=first, last_name=" ".join(parts[1:]), url=url)

    @property
    def key(self) -> tuple[str, str, Optional[str]]:
        """Composite identity used by the roster."""
        return (self.last_name, self.first_name, self.url)

    @property
    def sort_key(self) -> tuple[str, str]:
        return (self.last_name, self.first_name)


class AggregatePost(BaseModel):
    """One post in the aggregate, ready for templating."""

    model_config = ConfigDict(frozen=True)

    id: str
    url: Optional[str] = None
    title: Optional[str] = None
    author: str = Field(..., min_length=1)
    author_url: Optional[str] = None
    content: Optional[str] = None
    published_at: Optional[datetime] = None
    formatted_date: str = ""
    comments_enabled: bool = False


class AggregateResult(BaseModel):
    """The complete aggregate: title, author roster and posts."""

    model_config = ConfigDict(frozen=True)

    title: str
    authors: tuple[AuthorRecord, ...] = Field(default_factory=tuple)
    posts: tuple[AggregatePost, ...] = Field(default_factory=tuple)

    def to_template_data(self) -> dict[str, Any]:
        """Plain mapping in the shape the page and meta feed templates read."""
        return {
            "title": self.title,
            "authors": [
                {"first": author.first_name, "last": author.last_name, "url": author.url}
                for author in self.authors
            ],
            "posts": [
                {
                    "id": post.id,
                    "url": post.url,
                    "title": post.title,
                    "author": post.author,
                    "author_url": post.author_url,
                    "content": post.content,
                    "date": post.published_at,
                    "date_formatted": post.formatted_date,
                    "comments": post.comments_enabled,
                }
                for post in self.posts
            ],
        }

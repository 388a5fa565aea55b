"""Data models for markblog."""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


def _as_text(value: Any) -> str | None:
    """Normalize a YAML scalar into text, treating empty values as missing."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, date):
        return value.isoformat()
    text = str(value)
    return text or None


class PostMetadata(BaseModel):
    """Metadata extracted from post frontmatter."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    date: str | None = None
    description: str | None = None

    @field_validator("title", "date", "description", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: Any) -> str | None:
        return _as_text(value)


class Post(BaseModel):
    """A blog post projected from its Markdown file.

    ``content`` holds rendered HTML and is only filled in when a single post
    is fetched.
    """

    slug: str
    title: str
    date: str
    description: str = ""
    content: str | None = None


class LookupStatus(str, Enum):
    """Outcome of fetching a single post."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    READ_ERROR = "read_error"
    PARSE_ERROR = "parse_error"
    RENDER_ERROR = "render_error"


class PostLookup(BaseModel):
    """Result of a single-post lookup, distinguishing why a post is absent."""

    slug: str
    status: LookupStatus
    post: Post | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

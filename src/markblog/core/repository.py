"""Post repository backed by a directory of Markdown files."""

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

import yaml
from pydantic import ValidationError

from markblog.core.models import LookupStatus, Post, PostLookup, PostMetadata
from markblog.core.parser import render_markdown

logger = logging.getLogger(__name__)

DEFAULT_DATE = "2024-01-01"

POST_SUFFIX = ".md"


class FrontMatterError(ValueError):
    """Raised when a post's frontmatter block cannot be parsed."""


FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\n(.*?)^---[ \t]*(?:\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


def parse_frontmatter(text: str) -> tuple[PostMetadata, str]:
    """Split a post file into metadata and Markdown body.

    A file without a leading ``---`` block has empty metadata and the whole
    text as its body.

    Raises:
        FrontMatterError: If the block is not valid YAML or not a mapping.
    """
    text = text.removeprefix("\ufeff")
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return PostMetadata(), text

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Invalid YAML in frontmatter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Frontmatter must be a mapping, got {type(data).__name__}"
        )

    try:
        metadata = PostMetadata.model_validate(data)
    except ValidationError as e:
        raise FrontMatterError(f"Invalid frontmatter values: {e}") from e

    return metadata, text[match.end() :]


class PostRepository(ABC):
    """Abstract base class for post sources."""

    @abstractmethod
    async def list_posts(self) -> list[Post]:
        """List all posts without content, newest first."""
        ...

    @abstractmethod
    async def lookup_post(self, slug: str) -> PostLookup:
        """Fetch and render a post, reporting why it is absent if it is."""
        ...

    async def get_post(self, slug: str) -> Post | None:
        """Get a rendered post by slug. Returns None if it cannot be loaded."""
        lookup = await self.lookup_post(slug)
        return lookup.post

    async def list_slugs(self) -> list[str]:
        """List the slugs of all posts in listing order."""
        return [post.slug for post in await self.list_posts()]

    async def search_posts(self, query: str) -> list[Post]:
        """Filter the listing by title or description.

        Matching is a case-insensitive substring test. An empty query
        returns every post.
        """
        posts = await self.list_posts()
        query_lower = query.strip().lower()
        if not query_lower:
            return posts
        return [
            p
            for p in posts
            if query_lower in p.title.lower() or query_lower in p.description.lower()
        ]


class FilePostRepository(PostRepository):
    """Reads posts from ``<base_path>/<slug>.md`` files.

    Nothing is cached: every call re-reads the directory, so edits show up on
    the next request.
    """

    def __init__(
        self,
        base_path: Path,
        renderer: Callable[[str], str] | None = None,
        default_date: str = DEFAULT_DATE,
    ):
        self.base_path = base_path
        self.renderer = renderer or render_markdown
        self.default_date = default_date

    def _filename_to_slug(self, filename: str) -> str:
        """Convert filename to slug."""
        return filename.removesuffix(POST_SUFFIX)

    def _get_path(self, slug: str) -> Path | None:
        """Get full path for a slug, or None if the slug cannot name a post."""
        if not slug or "/" in slug or "\\" in slug or "\x00" in slug:
            return None
        return self.base_path / f"{slug}{POST_SUFFIX}"

    def _build_post(
        self, slug: str, metadata: PostMetadata, content: str | None = None
    ) -> Post:
        """Apply fallbacks for missing metadata fields."""
        return Post(
            slug=slug,
            title=metadata.title or slug,
            date=metadata.date or self.default_date,
            description=metadata.description or "",
            content=content,
        )

    def _load_summary(self, path: Path) -> Post:
        """Read a post file and build its list entry."""
        raw = path.read_text(encoding="utf-8")
        metadata, _ = parse_frontmatter(raw)
        return self._build_post(self._filename_to_slug(path.name), metadata)

    async def list_posts(self) -> list[Post]:
        """List all posts without content, sorted by date descending.

        Dates compare as strings. The sort is stable, so posts sharing a date
        keep directory order. Files that fail to read or parse are skipped.
        """
        self.base_path.mkdir(parents=True, exist_ok=True)

        posts = []
        for path in self.base_path.iterdir():
            if not path.name.endswith(POST_SUFFIX) or not path.is_file():
                continue
            try:
                posts.append(self._load_summary(path))
            except (OSError, UnicodeDecodeError, FrontMatterError) as e:
                logger.warning("Skipping post %s: %s", path.name, e)

        logger.debug("Loaded %d posts from %s", len(posts), self.base_path)
        return sorted(posts, key=lambda p: p.date, reverse=True)

    async def lookup_post(self, slug: str) -> PostLookup:
        """Fetch a post with rendered content."""
        path = self._get_path(slug)
        if path is None:
            logger.info("Rejected post slug: %r", slug)
            return PostLookup(slug=slug, status=LookupStatus.NOT_FOUND)

        try:
            raw = path.read_text(encoding="utf-8")
        except (FileNotFoundError, IsADirectoryError):
            logger.info("Post not found: %s", slug)
            return PostLookup(slug=slug, status=LookupStatus.NOT_FOUND)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read post %s", slug, exc_info=True)
            return PostLookup(slug=slug, status=LookupStatus.READ_ERROR, error=str(e))

        try:
            metadata, body = parse_frontmatter(raw)
        except FrontMatterError as e:
            logger.warning("Failed to parse frontmatter of post %s: %s", slug, e)
            return PostLookup(slug=slug, status=LookupStatus.PARSE_ERROR, error=str(e))

        try:
            content = self.renderer(body)
        except Exception as e:
            logger.exception("Failed to render post %s", slug)
            return PostLookup(
                slug=slug, status=LookupStatus.RENDER_ERROR, error=str(e)
            )

        return PostLookup(
            slug=slug,
            status=LookupStatus.FOUND,
            post=self._build_post(slug, metadata, content),
        )

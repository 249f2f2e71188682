"""Blog post models, loading and querying logic."""

import datetime
import logging
import math
import pathlib
from collections.abc import Callable, Iterable
from typing import Any

import pydantic

from . import content, render

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200


def reading_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    """Estimated minutes to read text, counting whitespace-separated words.

    Never less than one minute.
    """
    return max(1, math.ceil(len(text.split()) / words_per_minute))


def category_display_name(name: str) -> str:
    """Capitalizes each hyphen-separated word, e.g. 'system-design' -> 'System Design'."""
    return ' '.join(word[:1].upper() + word[1:] for word in name.split('-'))


class PostMetadata(pydantic.BaseModel):
    """Front matter of a blog post.

    Unrecognized front matter keys are kept as extra fields.
    """

    model_config = pydantic.ConfigDict(frozen=True, extra='allow')

    title: str
    date: datetime.date
    excerpt: str = ''
    tags: list[str] = []

    @pydantic.field_validator('date', mode='before')
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        # YAML yields date or datetime objects for unquoted values, str for quoted
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, str):
            return datetime.datetime.fromisoformat(value.strip()).date()
        return value

    @pydantic.field_validator('title', mode='before')
    @classmethod
    def _coerce_title(cls, value: Any) -> Any:
        # Unquoted titles like 1984 arrive from YAML as numbers
        if isinstance(value, int | float):
            return str(value)
        return value

    @pydantic.field_validator('excerpt', mode='before')
    @classmethod
    def _coerce_excerpt(cls, value: Any) -> Any:
        return '' if value is None else value

    @pydantic.field_validator('tags', mode='before')
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, list | tuple):
            return [str(tag) for tag in value]  # type: ignore[reportUnknownVariableType]
        return value


class Post(pydantic.BaseModel):
    """A single blog post with rendered HTML and its markdown source."""

    model_config = pydantic.ConfigDict(frozen=True)

    slug: str
    category: str
    metadata: PostMetadata
    content: str
    raw_content: str
    words_per_minute: int = WORDS_PER_MINUTE

    @property
    def reading_time(self) -> int:
        """Estimated reading time of the markdown body in minutes."""
        return reading_time(self.raw_content, self.words_per_minute)

    @property
    def category_display_name(self) -> str:
        return category_display_name(self.category)


class Category(pydantic.BaseModel):
    """A category directory summarized for display."""

    model_config = pydantic.ConfigDict(frozen=True)

    name: str
    display_name: str
    count: int


class PostIndex:
    """Immutable, date-ordered collection of posts answering blog queries.

    Posts are sorted newest first. Posts sharing a date keep the order they
    were given in, which for load_index() is category name then file name.

    Raises DuplicateSlugError if two posts share a slug.
    """

    _posts: tuple[Post, ...]
    _by_slug: dict[str, Post]
    _category_names: tuple[str, ...]

    def __init__(
        self, posts: Iterable[Post], category_names: Iterable[str] | None = None
    ) -> None:
        self._posts = tuple(sorted(posts, key=lambda p: p.metadata.date, reverse=True))

        self._by_slug = {}
        duplicates: list[str] = []
        for post in self._posts:
            if post.slug in self._by_slug:
                duplicates.append(post.slug)
                continue
            self._by_slug[post.slug] = post
        if duplicates:
            raise content.DuplicateSlugError(f'Duplicate slugs: {sorted(set(duplicates))}')

        names = set(category_names or ()) | {p.category for p in self._posts}
        self._category_names = tuple(sorted(names))

    def __len__(self) -> int:
        return len(self._posts)

    def get_all(self) -> list[Post]:
        """Return all posts, newest first."""
        return list(self._posts)

    def get_by_slug(self, slug: str) -> Post | None:
        """Return the post with the given slug, or None if there is none."""
        return self._by_slug.get(slug)

    def get_by_category(self, category: str) -> list[Post]:
        """Return posts of one category, newest first."""
        return [p for p in self._posts if p.category == category]

    def get_all_categories(self) -> list[Category]:
        """Return every category with its post count, sorted by name."""
        return [
            Category(
                name=name,
                display_name=category_display_name(name),
                count=len(self.get_by_category(name)),
            )
            for name in self._category_names
        ]

    def get_recent(self, limit: int = 5) -> list[Post]:
        """Return the newest `limit` posts."""
        if limit < 0:
            raise ValueError(f'limit must be non-negative, got {limit}')
        return list(self._posts[:limit])

    def get_related(self, slug: str, limit: int = 3) -> list[Post]:
        """Return up to `limit` posts sharing a category or a tag with `slug`.

        The post itself is never included. Unknown slugs yield an empty list.
        """
        if limit < 0:
            raise ValueError(f'limit must be non-negative, got {limit}')
        current = self.get_by_slug(slug)
        if current is None:
            return []

        tags = set(current.metadata.tags)
        related = [
            p
            for p in self._posts
            if p.slug != slug
            and (p.category == current.category or tags.intersection(p.metadata.tags))
        ]
        return related[:limit]

    def search(self, query: str) -> list[Post]:
        """Case-insensitive search over title, excerpt, markdown body and tags.

        Title, excerpt and body match on substring; tags must match exactly.
        A blank query matches nothing.
        """
        needle = query.strip().lower()
        if not needle:
            return []
        return [p for p in self._posts if _matches(p, needle)]


def _matches(post: Post, needle: str) -> bool:
    return (
        needle in post.metadata.title.lower()
        or needle in post.metadata.excerpt.lower()
        or needle in post.raw_content.lower()
        or any(tag.lower() == needle for tag in post.metadata.tags)
    )


class ContentConfig(pydantic.BaseModel):
    """Where posts live and the functions used to turn files into posts."""

    model_config = pydantic.ConfigDict(frozen=True)

    root: pathlib.Path
    extension: str = '.md'
    words_per_minute: int = pydantic.Field(default=WORDS_PER_MINUTE, gt=0)
    # Skip posts that fail to parse or render instead of failing the whole load
    skip_invalid: bool = False
    parser: Callable[[str], tuple[dict[str, Any], str]] = content.parse
    renderer: Callable[[str], str] = render.render


def load_post(config: ContentConfig, category: str, path: pathlib.Path) -> Post:
    """Read, parse, validate and render a single post file.

    Raises PostParseError (with the file path) for malformed front matter,
    invalid metadata or rendering failures, and ContentIOError if unreadable.
    """
    raw = content.read_raw(path)
    try:
        metadata, body = config.parser(raw)
        validated = PostMetadata.model_validate(metadata)
        html = config.renderer(body)
    except content.PostParseError as e:
        raise content.PostParseError(str(e), path) from e
    except pydantic.ValidationError as e:
        raise content.PostParseError(f'Invalid front matter: {e}', path) from e

    return Post(
        slug=path.stem,
        category=category,
        metadata=validated,
        content=html,
        raw_content=body,
        words_per_minute=config.words_per_minute,
    )


def load_posts(
    config: ContentConfig, categories: Iterable[str] | None = None
) -> list[Post]:
    """Load every post under the content root, in enumeration order.

    Categories default to every category directory under the root.

    Raises ContentIOError if the root or a category cannot be read. Invalid
    posts raise PostParseError unless config.skip_invalid is set, in which case
    they are logged and left out.
    """
    if categories is None:
        categories = content.list_categories(config.root)

    posts: list[Post] = []
    for category in categories:
        for path in content.list_post_files(config.root, category, config.extension):
            try:
                posts.append(load_post(config, category, path))
            except content.PostParseError as e:
                if not config.skip_invalid:
                    raise
                logger.warning('Skipping invalid post: %s', e)
    return posts


def load_index(config: ContentConfig) -> PostIndex:
    """Build a PostIndex from the content root.

    The index is only returned once every post has loaded, so callers never
    see a partial collection.
    """
    categories = content.list_categories(config.root)
    posts = load_posts(config, categories)
    index = PostIndex(posts, categories)
    logger.info(
        'Loaded %d posts in %d categories from %s', len(index), len(categories), config.root
    )
    return index

"""Reading and parsing markdown post files from the content directory.

The content root holds one subdirectory per category, each containing one
markdown file per post:

    posts/
      system-design/
        caching-strategies.md
      career/
        first-year-as-an-engineer.md
"""

import pathlib
from typing import Any

import frontmatter  # type: ignore[reportMissingTypeStubs]
import yaml


class ContentError(Exception):
    """Base class for failures while loading blog content."""


class ContentIOError(ContentError, OSError):
    """The content root, a category directory or a post file could not be read."""


class PostParseError(ContentError, ValueError):
    """A post file has malformed front matter, invalid metadata or fails to render."""

    def __init__(self, message: str, path: pathlib.Path | None = None) -> None:
        super().__init__(f'{path}: {message}' if path is not None else message)
        self.path = path


class DuplicateSlugError(ContentError, ValueError):
    """Two or more posts share the same slug."""


def list_categories(root: pathlib.Path) -> list[str]:
    """Return the names of category directories directly under the content root."""
    try:
        entries = list(root.iterdir())
    except OSError as e:
        raise ContentIOError(f'Cannot read content root {root}: {e}') from e
    return sorted(
        entry.name
        for entry in entries
        if entry.is_dir() and not entry.name.startswith('.')
    )


def list_post_files(
    root: pathlib.Path, category: str, extension: str = '.md'
) -> list[pathlib.Path]:
    """Return the post files of a category, sorted by file name."""
    category_dir = root / category
    try:
        entries = list(category_dir.iterdir())
    except OSError as e:
        raise ContentIOError(f'Cannot read category {category_dir}: {e}') from e
    return sorted(
        (entry for entry in entries if entry.is_file() and entry.suffix == extension),
        key=lambda p: p.name,
    )


def read_raw(path: pathlib.Path) -> str:
    """Read a post file as UTF-8 text."""
    try:
        return path.read_text(encoding='utf-8')
    except UnicodeDecodeError as e:
        raise PostParseError(f'Not valid UTF-8: {e}', path) from e
    except OSError as e:
        raise ContentIOError(f'Cannot read post {path}: {e}') from e


def parse(raw_text: str) -> tuple[dict[str, Any], str]:
    """Split raw post text into front matter metadata and markdown body.

    Text without a front matter block yields empty metadata and the whole text
    as body. Malformed YAML raises PostParseError, as do impossible unquoted
    dates such as 2024-13-01, which PyYAML fails to construct with ValueError.
    """
    try:
        post = frontmatter.loads(raw_text)
    except (yaml.YAMLError, ValueError) as e:
        raise PostParseError(f'Malformed front matter: {e}') from e

    return dict(post.metadata), post.content

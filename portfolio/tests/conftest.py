"""Shared fixtures for portfolio tests."""

import pathlib
from collections.abc import Callable

import pytest

from portfolio.app import blog

WritePost = Callable[..., pathlib.Path]


@pytest.fixture
def posts_root(tmp_path: pathlib.Path) -> pathlib.Path:
    """Returns an empty content root directory."""
    root = tmp_path / 'posts'
    root.mkdir()
    return root


@pytest.fixture
def write_post(posts_root: pathlib.Path) -> WritePost:
    """Returns a helper that writes a post file under the content root."""

    def _write(
        category: str,
        slug: str,
        *,
        title: str = 'Untitled',
        date: str = '2024-01-01',
        excerpt: str = '',
        tags: list[str] | None = None,
        body: str = 'Content',
    ) -> pathlib.Path:
        path = posts_root / category / f'{slug}.md'
        path.parent.mkdir(parents=True, exist_ok=True)
        tag_list = ', '.join(f"'{t}'" for t in tags or [])
        path.write_text(
            f"---\ntitle: '{title}'\ndate: '{date}'\nexcerpt: '{excerpt}'\n"
            f'tags: [{tag_list}]\n---\n\n{body}\n',
            encoding='utf-8',
        )
        return path

    return _write


@pytest.fixture
def config(posts_root: pathlib.Path) -> blog.ContentConfig:
    """Returns a content config pointing at the temporary content root."""
    return blog.ContentConfig(root=posts_root)

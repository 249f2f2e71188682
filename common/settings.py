"""Shared application settings read from environment variables."""

import os
import pathlib

REPO_ROOT = pathlib.Path(__file__).resolve().parent.parent

SITE_TITLE: str = os.environ.get('SITE_TITLE', 'Aryansh Kurmi')
SITE_URL: str = os.environ.get('SITE_URL', 'http://localhost:8000').rstrip('/')
AUTHOR_NAME: str = os.environ.get('AUTHOR_NAME', 'Aryansh Kurmi')
AUTHOR_EMAIL: str = os.environ.get('AUTHOR_EMAIL', 'hello@example.com')

POSTS_DIR: pathlib.Path = pathlib.Path(
    os.environ.get('POSTS_DIR', REPO_ROOT / 'portfolio' / 'posts')
)
# Skip posts with broken front matter instead of failing every request
SKIP_INVALID_POSTS: bool = os.environ.get('SKIP_INVALID_POSTS', '').lower() in (
    '1',
    'true',
    'yes',
)

LOG_LEVEL: str = os.environ.get('LOG_LEVEL', 'INFO').upper()

"""FastAPI application for the portfolio site and blog."""

import datetime
import logging
import pathlib
from typing import Annotated

import fastapi
import fastapi.responses
import fastapi.staticfiles
import pydantic

import common.app
import common.settings
import common.templates

from . import blog, content

APP_DIR = pathlib.Path(__file__).resolve().parent

RECENT_POSTS_ON_HOME = 3
RELATED_POSTS_ON_POST = 3

logger = logging.getLogger(__name__)

app = common.app.create_app(title='Portfolio')

app.mount(
    '/assets',
    fastapi.staticfiles.StaticFiles(directory=APP_DIR / 'static'),
    name='assets',
)

templates = common.templates.make_templates(APP_DIR / 'templates')


class PostSummary(pydantic.BaseModel):
    """Listing view of a post, without the rendered body."""

    slug: str
    category: str
    category_display_name: str
    title: str
    date: datetime.date
    excerpt: str
    tags: list[str]
    reading_time: int

    @classmethod
    def from_post(cls, post: blog.Post) -> 'PostSummary':
        return cls(
            slug=post.slug,
            category=post.category,
            category_display_name=post.category_display_name,
            title=post.metadata.title,
            date=post.metadata.date,
            excerpt=post.metadata.excerpt,
            tags=post.metadata.tags,
            reading_time=post.reading_time,
        )


def content_config() -> blog.ContentConfig:
    """Build the content configuration from environment settings."""
    return blog.ContentConfig(
        root=common.settings.POSTS_DIR,
        skip_invalid=common.settings.SKIP_INVALID_POSTS,
    )


def get_index() -> blog.PostIndex:
    """Load a fresh post index for the current request."""
    return blog.load_index(content_config())


Index = Annotated[blog.PostIndex, fastapi.Depends(get_index)]


@app.exception_handler(content.ContentError)
async def content_error_handler(
    request: fastapi.Request, exc: content.ContentError
) -> fastapi.responses.JSONResponse:
    """Fail the request rather than serve a partial or empty blog."""
    logger.error('Failed to load blog content for %s: %s', request.url.path, exc)
    return fastapi.responses.JSONResponse(
        status_code=500, content={'detail': 'Content unavailable'}
    )


def filter_posts(
    index: blog.PostIndex, category: str | None, q: str | None
) -> list[blog.Post]:
    """Apply the optional search query and category filter of the listing pages."""
    posts = index.search(q) if q and q.strip() else index.get_all()
    if category:
        posts = [p for p in posts if p.category == category]
    return posts


@app.get('/', response_class=fastapi.responses.HTMLResponse)
async def home(request: fastapi.Request, index: Index) -> fastapi.responses.HTMLResponse:
    """Render the portfolio home page with the most recent posts."""
    return templates.TemplateResponse(
        request=request,
        name='index.html.jinja2',
        context={
            'posts': index.get_recent(RECENT_POSTS_ON_HOME),
            'categories': index.get_all_categories(),
        },
    )


@app.get('/blog', response_class=fastapi.responses.HTMLResponse)
async def blog_index(
    request: fastapi.Request,
    index: Index,
    category: str | None = None,
    q: str | None = None,
) -> fastapi.responses.HTMLResponse:
    """Render the blog listing, optionally filtered by category and search query."""
    return templates.TemplateResponse(
        request=request,
        name='blog_index.html.jinja2',
        context={
            'posts': filter_posts(index, category, q),
            'categories': index.get_all_categories(),
            'selected_category': category,
            'query': q or '',
        },
    )


@app.get('/blog/{slug}', response_class=fastapi.responses.HTMLResponse)
async def post(
    request: fastapi.Request, slug: str, index: Index
) -> fastapi.responses.HTMLResponse:
    """Render an individual blog post by slug."""
    matched = index.get_by_slug(slug)
    if matched is None:
        raise fastapi.HTTPException(status_code=404, detail='Post not found')
    return templates.TemplateResponse(
        request=request,
        name='post.html.jinja2',
        context={
            'post': matched,
            'related_posts': index.get_related(slug, RELATED_POSTS_ON_POST),
        },
    )


@app.get('/rss.xml')
async def rss(index: Index) -> fastapi.responses.Response:
    """Render and serve the RSS feed."""
    xml = templates.get_template('rss.xml.jinja2').render(posts=index.get_all())  # type: ignore
    return fastapi.responses.Response(content=xml, media_type='application/rss+xml')


@app.get('/api/posts', response_model=list[PostSummary])
async def api_posts(
    index: Index, category: str | None = None, q: str | None = None
) -> list[PostSummary]:
    """List post summaries, newest first, with the same filters as /blog."""
    return [PostSummary.from_post(p) for p in filter_posts(index, category, q)]


@app.get('/api/categories', response_model=list[blog.Category])
async def api_categories(index: Index) -> list[blog.Category]:
    """List categories with their post counts."""
    return index.get_all_categories()

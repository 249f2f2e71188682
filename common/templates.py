"""Factory for creating Jinja2Templates with standard site globals."""

import datetime
import pathlib

import fastapi.templating

import common.settings


def datefmt(value: datetime.date, fmt: str = '%B %d, %Y') -> str:
    """Format a date for display, e.g. 'January 05, 2024'."""
    return value.strftime(fmt)


def make_templates(
    directory: pathlib.Path | str,
) -> fastapi.templating.Jinja2Templates:
    """Create a Jinja2Templates instance with site globals and filters pre-set."""
    templates = fastapi.templating.Jinja2Templates(directory=str(directory))
    templates.env.filters['datefmt'] = datefmt  # type: ignore[reportUnknownMemberType]
    templates.env.globals['site_title'] = common.settings.SITE_TITLE  # type: ignore[reportUnknownMemberType]
    templates.env.globals['site_url'] = common.settings.SITE_URL  # type: ignore[reportUnknownMemberType]
    templates.env.globals['author_name'] = common.settings.AUTHOR_NAME  # type: ignore[reportUnknownMemberType]
    templates.env.globals['author_email'] = common.settings.AUTHOR_EMAIL  # type: ignore[reportUnknownMemberType]
    return templates

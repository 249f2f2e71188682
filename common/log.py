"""Shared logging utilities for FastAPI applications."""

import logging

import common.settings


class HealthCheckFilter(logging.Filter):
    """Filter out health check requests from uvicorn access logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Return False to suppress health check log entries."""
        return '/health' not in record.getMessage()


def configure_logging(level: str | int | None = None) -> None:
    """Configure root logging and suppress health checks in uvicorn access logs.

    The level defaults to common.settings.LOG_LEVEL.
    """
    logging.basicConfig(
        level=level if level is not None else common.settings.LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    access_logger = logging.getLogger('uvicorn.access')
    if not any(isinstance(f, HealthCheckFilter) for f in access_logger.filters):
        access_logger.addFilter(HealthCheckFilter())

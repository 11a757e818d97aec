from collections.abc import MutableMapping
from datetime import UTC, datetime
from logging import INFO, Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from re import sub
from typing import Any
from uuid import UUID

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from pythonjsonlogger.json import JsonFormatter
from starlette.routing import BaseRoute, Match, Route

from app.configs import settings

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FALLBACK_SLUG = "post"


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        if type(route) is APIRoute and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if type(route) is Route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary


def today_str() -> str:
    """Return today's date as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(DATE_FORMAT)


def file_logger(logger: Logger) -> Logger:
    """
    Attach the rotating JSON file handler to a logger when file logging is on.

    Args:
        logger: Logger to decorate.

    Returns:
        Logger: The same logger, for chaining at module import time.
    """
    if not settings.LOG_TO_FILE:
        return logger

    log_file = Path(settings.LOG_FILE)
    if any(getattr(h, "baseFilename", None) == str(log_file.resolve()) for h in logger.handlers):
        return logger

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
    handler.setLevel(INFO)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger


def slugify(text: str) -> str:
    """
    Turn free text into a URL-safe slug.

    Lowercases, drops anything that is not alphanumeric, whitespace or a
    hyphen, then collapses whitespace and hyphen runs into single hyphens.

    Args:
        text: Source text, usually a title.

    Returns:
        str: Slug, or ``"post"`` when nothing usable remains.
    """
    slug = text.lower()
    slug = sub(r"[^a-z0-9\s-]", "", slug)
    slug = sub(r"[\s-]+", "-", slug)
    slug = slug.strip("-")
    return slug or FALLBACK_SLUG


def parse_uuid(value: str) -> UUID | None:
    """Parse a UUID string, returning None when it is malformed."""
    try:
        return UUID(value)
    except (TypeError, ValueError):
        return None


def format_datetime(value: datetime | None) -> str | None:
    """Format a stored timestamp as ISO 8601 in UTC; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()

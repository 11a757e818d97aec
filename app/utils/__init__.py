"""Utility helper functions."""

from app.utils.helpers import (
    file_logger,
    format_datetime,
    get_summary,
    host,
    parse_uuid,
    slugify,
    today_str,
)

__all__ = [
    "file_logger",
    "format_datetime",
    "get_summary",
    "host",
    "parse_uuid",
    "slugify",
    "today_str",
]

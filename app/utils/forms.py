"""Helpers for multipart form fields that carry structured text."""

from typing import Any

import orjson

from app.errors.blog import InvalidFormatError

TRUE_VALUES = frozenset({"true"})


def parse_structured(field: str, raw: str | None) -> Any:
    """
    Decode a JSON-encoded form field.

    Returns ``None`` for an absent or blank value; raises
    ``InvalidFormatError`` naming ``field`` when the text is not valid JSON.
    """
    if raw is None or not raw.strip():
        return None
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise InvalidFormatError(field, "malformed structured text") from e


def parse_string_list(field: str, raw: str | None) -> list[str] | None:
    """
    Read a list of strings from a form field.

    Accepts either a JSON array of strings or a comma-separated string.
    Values are trimmed; empty entries and repeats are dropped, first-seen
    order kept. Returns ``None`` when the field is absent.
    """
    if raw is None:
        return None

    stripped = raw.strip()
    if stripped[:1] in ("[", "{"):
        decoded = parse_structured(field, stripped)
        if not isinstance(decoded, list) or not all(isinstance(v, str) for v in decoded):
            raise InvalidFormatError(field, "expected a list of strings")
        values: list[str] = decoded
    else:
        values = stripped.split(",")

    seen: dict[str, None] = {}
    for value in values:
        if cleaned := value.strip():
            seen.setdefault(cleaned, None)
    return list(seen)


def parse_bool(raw: str | None) -> bool | None:
    """Only the literal text ``"true"`` (any case) is truthy; absent is ``None``."""
    if raw is None:
        return None
    return raw.strip().lower() in TRUE_VALUES

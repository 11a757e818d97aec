"""
Blog input validation.

Turns the raw multipart form of a create or update request into a
``BlogDraft`` / ``BlogPatch``, and decides which uploaded file belongs to
which section before anything is sent to storage.
"""

from collections.abc import Collection, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import ValidationError

from app.configs.settings import MAX_TITLE_LENGTH
from app.errors.blog import (
    InvalidFormatError,
    InvalidReferenceError,
    MissingFieldError,
    MissingSectionAssetError,
)
from app.models.category import CategoryDB
from app.repositories.category import CategoryRepository
from app.schemas.asset import Transformation
from app.schemas.blog import BlogDraft, BlogPatch, Meta, MetaPatch, SectionInput
from app.utils.forms import parse_bool, parse_string_list, parse_structured
from app.utils.helpers import parse_uuid

STATUSES = ("draft", "published")
EDIT_ORDER = ("crop", "brightness", "contrast", "saturation")

type SectionSource = tuple[Literal["file"], int] | tuple[Literal["url"], str]


@dataclass(frozen=True)
class BlogForm:
    """Raw text fields of a blog multipart request."""

    title: str | None = None
    description: str | None = None
    category: str | None = None
    tags: str | None = None
    featured: str | None = None
    status: str | None = None
    sections: str | None = None
    meta: str | None = None
    main_image_edit: str | None = None
    has_main_image: bool = False


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _first_error(e: ValidationError) -> str:
    error = e.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]


def _check_title(title: str) -> str:
    title = title.strip()
    if len(title) > MAX_TITLE_LENGTH:
        raise InvalidFormatError("title", f"must be at most {MAX_TITLE_LENGTH} characters")
    return title


def _check_status(raw: str | None) -> str | None:
    if raw is None:
        return None
    status = raw.strip().lower()
    if status not in STATUSES:
        raise InvalidFormatError("status", "must be 'draft' or 'published'")
    return status


def _keywords(raw: Any) -> list[str] | None:
    """``meta_keywords`` may be a list, nested JSON text or comma-separated text."""
    if raw is None:
        return None
    if isinstance(raw, list):
        if not all(isinstance(v, str) for v in raw):
            raise InvalidFormatError("meta", "meta_keywords must be a list of strings")
        return raw
    if isinstance(raw, str):
        return parse_string_list("meta", raw)
    raise InvalidFormatError("meta", "meta_keywords must be a list of strings")


def _meta_object(raw: str | None) -> dict[str, Any] | None:
    decoded = parse_structured("meta", raw)
    if decoded is None:
        return None
    if not isinstance(decoded, dict):
        raise InvalidFormatError("meta", "expected an object")
    return decoded


def parse_meta(raw: str | None) -> Meta:
    """Parse a complete meta block; title and description are required."""
    decoded = _meta_object(raw) or {}
    title = decoded.get("meta_title")
    description = decoded.get("meta_description")
    if not isinstance(title, str) or not title.strip():
        raise InvalidFormatError("meta", "meta_title is required")
    if not isinstance(description, str) or not description.strip():
        raise InvalidFormatError("meta", "meta_description is required")
    return Meta(
        meta_title=title.strip(),
        meta_description=description.strip(),
        meta_keywords=_keywords(decoded.get("meta_keywords")) or [],
    )


def parse_meta_patch(raw: str | None) -> MetaPatch | None:
    """Parse a partial meta block for updates."""
    decoded = _meta_object(raw)
    if decoded is None:
        return None
    try:
        return MetaPatch(
            meta_title=decoded.get("meta_title"),
            meta_description=decoded.get("meta_description"),
            meta_keywords=_keywords(decoded.get("meta_keywords")),
        )
    except ValidationError as e:
        raise InvalidFormatError("meta", _first_error(e)) from e


def parse_sections(raw: str | None) -> list[SectionInput] | None:
    """Parse the section descriptors; every entry must be an object."""
    decoded = parse_structured("sections", raw)
    if decoded is None:
        return None
    if not isinstance(decoded, list):
        raise InvalidFormatError("sections", "expected a list of sections")

    sections: list[SectionInput] = []
    for index, entry in enumerate(decoded):
        if not isinstance(entry, dict):
            raise InvalidFormatError("sections", f"section {index} is not an object")
        entry = dict(entry)
        if isinstance(entry.get("section_list"), str):
            entry["section_list"] = parse_string_list("sections", entry["section_list"]) or []
        try:
            sections.append(SectionInput.model_validate(entry))
        except ValidationError as e:
            reason = f"section {index}: {_first_error(e)}"
            raise InvalidFormatError("sections", reason) from e
    return sections


def parse_main_image_edit(raw: str | None) -> list[Transformation]:
    """
    Parse the main-image edit instructions.

    Accepts an ordered list of ``{"effect": ..., "amount" | "box": ...}``
    objects, or a single object keyed by effect name, e.g.
    ``{"crop": {"x": 0, "y": 0, "width": 10, "height": 10}, "brightness": 20}``,
    which is applied crop first, then brightness, contrast, saturation.
    """
    decoded = parse_structured("mainImageEdit", raw)
    if decoded is None:
        return []

    if isinstance(decoded, dict):
        steps: list[Any] = []
        for effect in EDIT_ORDER:
            if (value := decoded.get(effect)) is None:
                continue
            if effect == "crop":
                steps.append({"effect": effect, "box": value})
            else:
                steps.append({"effect": effect, "amount": value})
    elif isinstance(decoded, list):
        steps = decoded
    else:
        raise InvalidFormatError("mainImageEdit", "expected an object or a list")

    try:
        return [Transformation.model_validate(step) for step in steps]
    except ValidationError as e:
        raise InvalidFormatError("mainImageEdit", _first_error(e)) from e


async def resolve_category(categories: CategoryRepository, raw: str) -> CategoryDB:
    """Resolve the ``category`` field to a stored category."""
    value = raw.strip()
    category_id = parse_uuid(value)
    category = await categories.get_by_id(category_id) if category_id else None
    if category is None:
        raise InvalidReferenceError("category", value)
    return category


async def validate_create(form: BlogForm, categories: CategoryRepository) -> BlogDraft:
    """
    Validate a create request.

    Raises:
        MissingFieldError: Listing every absent required field
        InvalidFormatError: For malformed structured fields
        InvalidReferenceError: When the category does not exist
    """
    required = {
        "title": form.title,
        "description": form.description,
        "category": form.category,
        "meta": form.meta,
    }
    missing = [name for name, value in required.items() if _blank(value)]
    if not form.has_main_image:
        missing.append("mainImage")
    if missing:
        raise MissingFieldError(missing)

    title = _check_title(form.title or "")
    meta = parse_meta(form.meta)
    tags = parse_string_list("tags", form.tags) or []
    sections = parse_sections(form.sections) or []
    edits = parse_main_image_edit(form.main_image_edit)
    status = _check_status(form.status) or "draft"
    category = await resolve_category(categories, form.category or "")

    return BlogDraft(
        title=title,
        description=(form.description or "").strip(),
        category_id=category.id,
        tags=tags,
        featured=bool(parse_bool(form.featured)),
        status=status,
        sections=sections,
        meta=meta,
        main_image_edit=edits,
    )


async def validate_update(form: BlogForm, categories: CategoryRepository) -> BlogPatch:
    """
    Validate an update request; every field is optional.

    Raises:
        InvalidFormatError: For malformed structured fields
        InvalidReferenceError: When a supplied category does not exist
    """
    title = None if _blank(form.title) else _check_title(form.title or "")
    description = None if _blank(form.description) else (form.description or "").strip()
    category_id = None
    if not _blank(form.category):
        category_id = (await resolve_category(categories, form.category or "")).id

    return BlogPatch(
        title=title,
        description=description,
        category_id=category_id,
        tags=parse_string_list("tags", form.tags),
        featured=parse_bool(form.featured),
        status=_check_status(form.status),
        sections=parse_sections(form.sections),
        meta=parse_meta_patch(form.meta),
        main_image_edit=parse_main_image_edit(form.main_image_edit),
    )


def plan_section_images(
    sections: Sequence[SectionInput],
    filenames: Sequence[str],
    stored: Collection[str] = (),
) -> list[SectionSource]:
    """
    Decide where each section's image comes from.

    Files whose name (or name without extension) equals a section's
    ``image_key`` are bound to that section. Sections without a key take the
    remaining files in order. A section left without a file falls back to
    its ``section_img``, but only when that URL is one of ``stored``, the
    assets the post already references (updates).

    Args:
        sections: Section descriptors in order
        filenames: Uploaded section file names in upload order
        stored: Asset URLs the post currently references; empty on create

    Returns:
        list[SectionSource]: ``("file", index)`` or ``("url", url)`` per section

    Raises:
        MissingSectionAssetError: For the first section with no usable image
    """
    claimed: set[int] = set()
    keyed: dict[int, int] = {}
    for position, section in enumerate(sections):
        if not section.image_key:
            continue
        for index, name in enumerate(filenames):
            if index in claimed:
                continue
            if section.image_key in (name, name.rsplit(".", 1)[0]):
                keyed[position] = index
                claimed.add(index)
                break

    free = (index for index in range(len(filenames)) if index not in claimed)
    plan: list[SectionSource] = []
    for position, section in enumerate(sections):
        if position in keyed:
            plan.append(("file", keyed[position]))
            continue
        if not section.image_key and (index := next(free, None)) is not None:
            plan.append(("file", index))
            continue
        if section.section_img and section.section_img in stored:
            plan.append(("url", section.section_img))
            continue
        raise MissingSectionAssetError(position)
    return plan

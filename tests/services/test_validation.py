# tests/services/test_validation.py
"""Tests for blog input validation and section image planning."""

from uuid import uuid4

import orjson
import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from app.errors.blog import (
    InvalidFormatError,
    InvalidReferenceError,
    MissingFieldError,
    MissingSectionAssetError,
)
from app.models import CategoryDB
from app.repositories import CategoryRepository
from app.schemas.blog import SectionInput
from app.services.validation import (
    BlogForm,
    parse_main_image_edit,
    parse_meta,
    parse_meta_patch,
    parse_sections,
    plan_section_images,
    validate_create,
    validate_update,
)

META = '{"meta_title": "Title", "meta_description": "Description"}'


def complete_form(category: CategoryDB, /, **overrides: object) -> BlogForm:
    values: dict[str, object] = {
        "title": "  Hello World  ",
        "description": "Body",
        "category": str(category.id),
        "meta": META,
        "has_main_image": True,
    }
    values.update(overrides)
    return BlogForm(**values)  # type: ignore[arg-type]


class TestParseMeta:
    def test_complete_meta(self) -> None:
        meta = parse_meta(
            '{"meta_title": " T ", "meta_description": "D", "meta_keywords": "a, b, a"}',
        )

        assert meta.meta_title == "T"
        assert meta.meta_keywords == ["a", "b"]

    @pytest.mark.parametrize(
        "raw",
        ['{"meta_description": "D"}', '{"meta_title": "T", "meta_description": "  "}', "[]", "{"],
    )
    def test_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidFormatError) as exc_info:
            parse_meta(raw)
        assert exc_info.value.field == "meta"

    def test_keywords_as_list(self) -> None:
        meta = parse_meta(
            orjson.dumps(
                {"meta_title": "T", "meta_description": "D", "meta_keywords": ["x", "x", " y "]},
            ).decode(),
        )
        assert meta.meta_keywords == ["x", "y"]

    def test_keywords_must_be_strings(self) -> None:
        with pytest.raises(InvalidFormatError):
            parse_meta('{"meta_title": "T", "meta_description": "D", "meta_keywords": [1]}')

    def test_patch_is_partial(self) -> None:
        patch = parse_meta_patch('{"meta_keywords": "seo"}')

        assert patch is not None
        assert patch.meta_title is None
        assert patch.meta_keywords == ["seo"]
        assert parse_meta_patch(None) is None


class TestParseSections:
    def test_sections_parsed_in_order(self) -> None:
        sections = parse_sections(
            orjson.dumps(
                [
                    {"section_title": "One", "section_list": "x, y", "extra": 1},
                    {"section_title": "Two", "image_key": "two.png"},
                ],
            ).decode(),
        )

        assert sections is not None
        assert [s.section_title for s in sections] == ["One", "Two"]
        assert sections[0].section_list == ["x", "y"]
        assert sections[1].image_key == "two.png"

    @pytest.mark.parametrize("raw", ['{"section_title": "x"}', "[1]", '[{"section_list": 5}]'])
    def test_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidFormatError) as exc_info:
            parse_sections(raw)
        assert exc_info.value.field == "sections"

    def test_absent(self) -> None:
        assert parse_sections(None) is None
        assert parse_sections("   ") is None


class TestParseMainImageEdit:
    def test_object_form_is_applied_crop_first(self) -> None:
        edits = parse_main_image_edit(
            '{"saturation": 5, "brightness": -5, "crop": {"width": 10, "height": 20}}',
        )

        assert [e.effect for e in edits] == ["crop", "brightness", "saturation"]
        assert edits[0].box is not None
        assert (edits[0].box.x, edits[0].box.height) == (0, 20)

    def test_list_form_keeps_given_order(self) -> None:
        edits = parse_main_image_edit(
            '[{"effect": "contrast", "amount": 3}, {"effect": "brightness", "amount": 4}]',
        )
        assert [e.effect for e in edits] == ["contrast", "brightness"]

    @pytest.mark.parametrize(
        "raw",
        [
            '{"brightness": 101}',
            '{"crop": {"width": 0, "height": 1}}',
            '[{"effect": "blur", "amount": 3}]',
            '[{"effect": "crop"}]',
            '"brightness"',
        ],
    )
    def test_rejected(self, raw: str) -> None:
        with pytest.raises(InvalidFormatError) as exc_info:
            parse_main_image_edit(raw)
        assert exc_info.value.field == "mainImageEdit"

    def test_absent(self) -> None:
        assert parse_main_image_edit(None) == []


class TestValidateCreate:
    @pytest.mark.asyncio
    async def test_valid(self, db_session: AsyncSession, category: CategoryDB) -> None:
        draft = await validate_create(
            complete_form(category, tags="b,a,b", featured="True", status="PUBLISHED"),
            CategoryRepository(db_session),
        )

        assert draft.title == "Hello World"
        assert draft.category_id == category.id
        assert draft.tags == ["b", "a"]
        assert draft.featured is True
        assert draft.status == "published"
        assert draft.sections == []

    @pytest.mark.asyncio
    async def test_every_missing_field_reported(self, db_session: AsyncSession) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            await validate_create(BlogForm(title="   "), CategoryRepository(db_session))

        assert exc_info.value.fields == ["title", "description", "category", "meta", "mainImage"]

    @pytest.mark.asyncio
    async def test_title_too_long(self, db_session: AsyncSession, category: CategoryDB) -> None:
        with pytest.raises(InvalidFormatError) as exc_info:
            await validate_create(complete_form(category, title="x" * 201), CategoryRepository(db_session))
        assert exc_info.value.field == "title"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["food", str(uuid4())])
    async def test_unknown_category(
        self,
        db_session: AsyncSession,
        category: CategoryDB,
        value: str,
    ) -> None:
        with pytest.raises(InvalidReferenceError) as exc_info:
            await validate_create(complete_form(category, category=value), CategoryRepository(db_session))
        assert exc_info.value.details == {"field": "category", "value": value}


class TestValidateUpdate:
    @pytest.mark.asyncio
    async def test_empty_form_changes_nothing(self, db_session: AsyncSession) -> None:
        patch = await validate_update(BlogForm(), CategoryRepository(db_session))

        assert patch.model_dump(exclude_none=True) == {"main_image_edit": []}

    @pytest.mark.asyncio
    async def test_featured_false_is_kept(self, db_session: AsyncSession) -> None:
        patch = await validate_update(BlogForm(featured="no"), CategoryRepository(db_session))
        assert patch.featured is False

    @pytest.mark.asyncio
    async def test_bad_status(self, db_session: AsyncSession) -> None:
        with pytest.raises(InvalidFormatError):
            await validate_update(BlogForm(status="archived"), CategoryRepository(db_session))


class TestPlanSectionImages:
    def test_positional(self) -> None:
        sections = [SectionInput(), SectionInput()]
        assert plan_section_images(sections, ["a.jpg", "b.jpg"]) == [
            ("file", 0),
            ("file", 1),
        ]

    def test_keys_claim_files_first(self) -> None:
        sections = [SectionInput(), SectionInput(image_key="a"), SectionInput()]

        plan = plan_section_images(sections, ["a.jpg", "b.jpg", "c.jpg"])

        assert plan == [("file", 1), ("file", 0), ("file", 2)]

    def test_unmatched_key_keeps_stored_image(self) -> None:
        sections = [SectionInput(image_key="missing.jpg", section_img="https://x/old.jpg")]

        plan = plan_section_images(sections, ["other.jpg"], ["https://x/old.jpg"])

        assert plan == [("url", "https://x/old.jpg")]

    def test_stored_image_not_accepted_on_create(self) -> None:
        sections = [SectionInput(section_img="https://x/old.jpg")]

        with pytest.raises(MissingSectionAssetError) as exc_info:
            plan_section_images(sections, [])
        assert exc_info.value.index == 0

    def test_first_section_without_image_reported(self) -> None:
        sections = [SectionInput(), SectionInput(), SectionInput()]

        with pytest.raises(MissingSectionAssetError) as exc_info:
            plan_section_images(sections, ["a.jpg"], ["https://x/old.jpg"])
        assert exc_info.value.details == {"field": "section_images", "section": 1}

    def test_url_outside_post_not_kept(self) -> None:
        sections = [
            SectionInput(section_img="https://x/old.jpg"),
            SectionInput(section_img="https://x/other-post.jpg"),
        ]

        with pytest.raises(MissingSectionAssetError) as exc_info:
            plan_section_images(sections, [], ["https://x/old.jpg"])
        assert exc_info.value.index == 1

# tests/test_invariants.py
"""Tests for row invariants."""

import pytest

from studydesk.catalog.invariants import check, validate_course, validate_item, validate_provider
from studydesk.errors import IntegrityViolationError
from studydesk.models.catalog import Category, Course, Item, MediaKind, Provider


def test_valid_rows_pass():
    validate_provider(Provider(id="p1", name="Vision", category_id="gs1"), {"gs1"})
    validate_course(Course(id="c1", name="Polity", provider_id="p1"), {"p1"})
    validate_item(
        Item(id="i1", title="Intro", course_id="c1", kind=MediaKind.VIDEO, filename="intro.mp4"),
        {"c1"},
    )


def test_provider_with_unknown_category():
    with pytest.raises(IntegrityViolationError, match="valid category_id. Got: gs9") as exc_info:
        validate_provider(Provider(id="p1", name="Vision", category_id="gs9"), {"gs1"})

    assert exc_info.value.entity == "provider"


def test_blank_names_are_rejected():
    with pytest.raises(IntegrityViolationError, match="non-empty name"):
        validate_course(Course(id="c1", name="   ", provider_id="p1"), {"p1"})

    with pytest.raises(IntegrityViolationError, match="non-empty title"):
        validate_item(
            Item(id="i1", title=" ", course_id="c1", kind=MediaKind.DOCUMENT, filename=" .pdf"),
            {"c1"},
        )


def test_missing_id_is_rejected():
    with pytest.raises(IntegrityViolationError, match="valid ID"):
        validate_provider(Provider(id="", name="Vision", category_id="gs1"), {"gs1"})


def test_item_parent_must_be_in_valid_set():
    item = Item(id="i1", title="Intro", course_id="c2", kind=MediaKind.VIDEO, filename="intro.mp4")

    with pytest.raises(IntegrityViolationError, match="valid course_id"):
        check(item, {"c1"})


def test_check_rejects_unknown_types():
    with pytest.raises(TypeError):
        check(Category(id="gs1", name="GS1", full_name="General Studies 1"), set())

# studydesk/catalog/invariants.py
"""
Data invariants checked before a row is created.

Each check takes the set of parent ids that are valid at that moment and
raises IntegrityViolationError on the first problem found.
"""

import logging
from typing import Collection, Union

from ..errors import IntegrityViolationError
from ..models.catalog import Course, Item, MediaKind, Provider


logger = logging.getLogger(__name__)


def _fail(entity: str, message: str, row: object) -> None:
    logger.error("Invariant violation (%s): %s %r", entity, message, row)
    raise IntegrityViolationError(entity, message)


def validate_provider(provider: Provider, valid_category_ids: Collection[str]) -> None:
    if not provider.id:
        _fail("provider", "Provider must have a valid ID", provider)
    if not provider.name.strip():
        _fail("provider", "Provider must have a non-empty name", provider)
    if provider.category_id not in valid_category_ids:
        _fail("provider", f"Provider must have a valid category_id. Got: {provider.category_id}", provider)


def validate_course(course: Course, valid_provider_ids: Collection[str]) -> None:
    if not course.id:
        _fail("course", "Course must have a valid ID", course)
    if not course.name.strip():
        _fail("course", "Course must have a non-empty name", course)
    if course.provider_id not in valid_provider_ids:
        _fail("course", f"Course must have a valid provider_id. Got: {course.provider_id}", course)


def validate_item(item: Item, valid_course_ids: Collection[str]) -> None:
    if not item.id:
        _fail("item", "Item must have a valid ID", item)
    if not item.title.strip():
        _fail("item", "Item must have a non-empty title", item)
    if item.course_id not in valid_course_ids:
        _fail("item", f"Item must have a valid course_id. Got: {item.course_id}", item)
    if item.kind not in (MediaKind.VIDEO, MediaKind.DOCUMENT):
        _fail("item", f"Item kind must be 'video' or 'document'. Got: {item.kind}", item)


def check(row: Union[Provider, Course, Item], valid_parent_ids: Collection[str]) -> None:
    """Dispatch to the validator for the row's type."""
    if isinstance(row, Provider):
        validate_provider(row, valid_parent_ids)
    elif isinstance(row, Course):
        validate_course(row, valid_parent_ids)
    elif isinstance(row, Item):
        validate_item(row, valid_parent_ids)
    else:
        raise TypeError(f"Unknown invariant type: {type(row).__name__}")

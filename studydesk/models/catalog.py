# studydesk/models/catalog.py

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class MediaKind(str, Enum):
    """Recognised item media kinds."""

    VIDEO = "video"
    DOCUMENT = "document"


class Category(BaseModel):
    """
    Fixed top-level subject grouping. Seeded once, never created by a sync.
    """

    id: str
    name: str                         # Short name, e.g. "GS1"
    full_name: str
    rank: int = 0
    icon: Optional[str] = None


class Provider(BaseModel):
    id: str
    name: str
    category_id: str
    rank: int = 0
    created_at: datetime = Field(default_factory=datetime.now)


class Course(BaseModel):
    id: str
    name: str
    provider_id: str
    rank: int = 0
    source_path: Optional[str] = None  # "Category/Provider/Course" as last seen on disk
    created_at: datetime = Field(default_factory=datetime.now)


class Item(BaseModel):
    """
    A single video or document inside a course.

    `completed`, `last_position` and `last_opened_at` belong to the user and
    the viewer; a sync only ever touches `rank` (and creation defaults).
    """

    id: str
    title: str
    course_id: str
    kind: MediaKind
    filename: str
    rank: int = 0
    completed: bool = False
    last_position: float = 0
    last_opened_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.now)


class ConfigEntry(BaseModel):
    """Row of the config collection (e.g. the serialised master folder)."""

    id: str
    value: dict[str, Any] = Field(default_factory=dict)


class CourseProgress(BaseModel):
    total: int = 0
    completed: int = 0
    percent: int = 0


class RecentItem(BaseModel):
    """An opened item enriched with its place in the hierarchy."""

    item: Item
    course_name: str
    provider_name: str
    category_id: str
    category_name: str = "Unknown"

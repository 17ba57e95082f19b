# studydesk/catalog/state.py
"""
Read-through cache over the catalog store.

Child lists are cached per parent and must be invalidated after a sync pass
(the sync service does this) or after any direct write.
"""

import uuid
from datetime import datetime
from typing import Any, Callable, Collection, Dict, List, Optional

from ..models.catalog import Category, Course, CourseProgress, Item, Provider, RecentItem
from ..store.base import CatalogStore
from .invariants import check


def generate_id() -> str:
    """Generate a unique row identifier."""
    return uuid.uuid4().hex[:12]


def _by_rank(rows: List[Any]) -> List[Any]:
    return sorted(rows, key=lambda r: r.rank)


class CatalogState:
    """Cached catalog reads, row creation and the few field updates the viewer makes."""

    def __init__(self, store: CatalogStore):
        self.store = store
        self._providers: Dict[str, List[Provider]] = {}
        self._courses: Dict[str, List[Course]] = {}
        self._items: Dict[str, List[Item]] = {}

    def invalidate_cache(self) -> None:
        """Drop every cached child list (use after bulk operations)."""
        self._providers = {}
        self._courses = {}
        self._items = {}

    async def get_categories(self) -> List[Category]:
        return _by_rank(await self.store.get_all("categories"))

    async def get_category(self, category_id: str) -> Optional[Category]:
        return await self.store.get("categories", category_id)

    async def get_providers(self, category_id: str) -> List[Provider]:
        if category_id not in self._providers:
            rows = await self.store.get_by_parent("providers", "category_id", category_id)
            self._providers[category_id] = _by_rank(rows)
        return self._providers[category_id]

    async def get_provider(self, provider_id: str) -> Optional[Provider]:
        return await self.store.get("providers", provider_id)

    async def get_courses(self, provider_id: str) -> List[Course]:
        if provider_id not in self._courses:
            rows = await self.store.get_by_parent("courses", "provider_id", provider_id)
            self._courses[provider_id] = _by_rank(rows)
        return self._courses[provider_id]

    async def get_course(self, course_id: str) -> Optional[Course]:
        return await self.store.get("courses", course_id)

    async def get_items(self, course_id: str) -> List[Item]:
        if course_id not in self._items:
            rows = await self.store.get_by_parent("items", "course_id", course_id)
            self._items[course_id] = _by_rank(rows)
        return self._items[course_id]

    async def get_item(self, item_id: str) -> Optional[Item]:
        return await self.store.get("items", item_id)

    async def create(self, row: Any, valid_parent_ids: Collection[str]) -> Any:
        """
        Check a new row against its parent set and write it.

        Raises:
            IntegrityViolationError: The row is refused and nothing is written
        """
        check(row, valid_parent_ids)

        if isinstance(row, Provider):
            await self.store.put("providers", row)
            self._providers.pop(row.category_id, None)
        elif isinstance(row, Course):
            await self.store.put("courses", row)
            self._courses.pop(row.provider_id, None)
        else:
            await self.store.put("items", row)
            self._items.pop(row.course_id, None)
        return row

    async def update_item(
        self,
        item_id: str,
        is_current: Optional[Callable[[], bool]] = None,
        **fields: Any,
    ) -> Optional[Item]:
        """
        Re-read an item and write back only the given fields.

        Args:
            item_id: Item to update
            is_current: Checked after the read; when it returns False
                nothing is written

        Returns:
            The updated item, or None if it no longer exists or the
            caller was superseded during the read
        """
        item = await self.store.get("items", item_id)
        if is_current is not None and not is_current():
            return None
        if item is None:
            return None

        updated = item.model_copy(update=fields)
        await self.store.put("items", updated)
        self._items.pop(updated.course_id, None)
        return updated

    async def get_course_progress(self, course_id: str) -> CourseProgress:
        """Completed/total items of a course."""
        items = await self.get_items(course_id)
        total = len(items)
        completed = sum(1 for i in items if i.completed)
        percent = round(completed / total * 100) if total > 0 else 0
        return CourseProgress(total=total, completed=completed, percent=percent)

    async def next_incomplete_item(self, item: Item) -> Optional[Item]:
        """The next item after `item` in its course that is not completed."""
        items = await self.get_items(item.course_id)
        index = next((i for i, row in enumerate(items) if row.id == item.id), None)
        if index is None:
            return None
        for candidate in items[index + 1:]:
            if not candidate.completed:
                return candidate
        return None

    async def get_recent_items(
        self, limit: int = 3, category_id: Optional[str] = None
    ) -> List[RecentItem]:
        """
        Recently opened items, newest first.

        Args:
            limit: Max number to return
            category_id: Only items under this category
        """
        opened = [i for i in await self.store.get_all("items") if i.last_opened_at]
        opened.sort(key=lambda i: i.last_opened_at or datetime.min, reverse=True)

        result: List[RecentItem] = []
        for item in opened:
            course = await self.get_course(item.course_id)
            if course is None:
                continue
            provider = await self.get_provider(course.provider_id)
            if provider is None:
                continue
            if category_id and provider.category_id != category_id:
                continue

            category = await self.get_category(provider.category_id)
            result.append(
                RecentItem(
                    item=item,
                    course_name=course.name,
                    provider_name=provider.name,
                    category_id=provider.category_id,
                    category_name=category.name if category else "Unknown",
                )
            )
            if len(result) >= limit:
                break

        return result

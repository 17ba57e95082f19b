# studydesk/sync/planner.py
"""
Diff between the stored catalog and one scan of the master folder.

`plan_reconcile` is pure: it reads a CatalogSnapshot and a ScanTree and
returns the rows to create, the rows to update and the keys to delete,
in the order they must be applied. Nothing is written here.

Matching rules:
    - Providers and Courses are found by case-insensitive name within their
      parent, or created with the next rank
    - Items are found by exact filename within their Course, or created with
      rank = position in the sorted listing
    - An existing Item only ever has its rank updated
    - A branch that could not be listed keeps everything stored beneath it
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Set, Tuple, Union

from ..catalog.state import generate_id
from ..library.classify import title_from_filename
from ..models.catalog import Course, Item, Provider
from ..models.scan import CategoryNode, CourseNode, ProviderNode, ScanTree
from ..store.base import CatalogStore


Row = Union[Provider, Course, Item]


@dataclass
class CatalogSnapshot:
    """Every provider, course and item as stored before a pass."""

    providers: List[Provider] = field(default_factory=list)
    courses: List[Course] = field(default_factory=list)
    items: List[Item] = field(default_factory=list)

    @classmethod
    async def load(cls, store: CatalogStore) -> "CatalogSnapshot":
        return cls(
            providers=await store.get_all("providers"),
            courses=await store.get_all("courses"),
            items=await store.get_all("items"),
        )


@dataclass
class ReconcilePlan:
    """
    Ordered operations for one pass.

    `creates` lists each parent before its children. `deletes` lists each
    child before its parent. The `valid_*` sets hold identifiers of stored
    rows observed in this pass; rows created by the plan join them as they
    are written.
    """

    creates: List[Row] = field(default_factory=list)
    updates: List[Row] = field(default_factory=list)
    deletes: List[Tuple[str, str]] = field(default_factory=list)
    valid_categories: Set[str] = field(default_factory=set)
    valid_providers: Set[str] = field(default_factory=set)
    valid_courses: Set[str] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        return not (self.creates or self.updates or self.deletes)


def _group(rows: Iterable[Row], parent_field: str) -> Dict[str, List[Row]]:
    grouped: Dict[str, List[Row]] = defaultdict(list)
    for row in sorted(rows, key=lambda r: r.rank):
        grouped[getattr(row, parent_field)].append(row)
    return grouped


def _find_by_name(rows: List[Row], name: str):
    lowered = name.lower()
    return next((r for r in rows if r.name.lower() == lowered), None)


class _Planner:
    def __init__(self, snapshot: CatalogSnapshot, id_factory: Callable[[], str]):
        self.snapshot = snapshot
        self.new_id = id_factory
        self.providers_by_category = _group(snapshot.providers, "category_id")
        self.courses_by_provider = _group(snapshot.courses, "provider_id")
        self.items_by_course = _group(snapshot.items, "course_id")

        self.plan = ReconcilePlan()
        self.seen_providers: Set[str] = set()
        self.seen_courses: Set[str] = set()
        self.seen_items: Set[str] = set()
        self.stored_provider_ids = {p.id for p in snapshot.providers}
        self.stored_course_ids = {c.id for c in snapshot.courses}

    def run(self, tree: ScanTree, matches: Mapping[str, str]) -> ReconcilePlan:
        for folder_name, category_id in matches.items():
            node = tree.categories.get(folder_name)
            if node is None:
                continue
            self.plan.valid_categories.add(category_id)
            self._category(category_id, node)

        self._collect_garbage(set(matches.values()))

        self.plan.valid_providers = self.seen_providers & self.stored_provider_ids
        self.plan.valid_courses = self.seen_courses & self.stored_course_ids
        return self.plan

    def _category(self, category_id: str, node: CategoryNode) -> None:
        siblings = self.providers_by_category[category_id]
        if not node.readable:
            self._protect_providers(siblings)
            return

        for provider_node in node.providers.values():
            provider = _find_by_name(siblings, provider_node.name)
            if provider is None:
                provider = Provider(
                    id=self.new_id(),
                    name=provider_node.name,
                    category_id=category_id,
                    rank=len(siblings),
                )
                siblings.append(provider)
                self.plan.creates.append(provider)

            self.seen_providers.add(provider.id)
            self._provider(provider, provider_node)

    def _provider(self, provider: Provider, node: ProviderNode) -> None:
        siblings = self.courses_by_provider[provider.id]
        if not node.readable:
            self._protect_courses(siblings)
            return

        for course_node in node.courses.values():
            course = _find_by_name(siblings, course_node.name)
            if course is None:
                course = Course(
                    id=self.new_id(),
                    name=course_node.name,
                    provider_id=provider.id,
                    rank=len(siblings),
                    source_path=course_node.path,
                )
                siblings.append(course)
                self.plan.creates.append(course)
            elif course.source_path != course_node.path:
                self.plan.updates.append(course.model_copy(update={"source_path": course_node.path}))

            self.seen_courses.add(course.id)
            self._course(course, course_node)

    def _course(self, course: Course, node: CourseNode) -> None:
        stored = self.items_by_course[course.id]
        if not node.readable:
            self.seen_items.update(i.id for i in stored)
            return

        by_filename = {i.filename: i for i in stored}
        for position, scanned in enumerate(node.files):
            item = by_filename.get(scanned.name)
            if item is None:
                item = Item(
                    id=self.new_id(),
                    title=title_from_filename(scanned.name),
                    course_id=course.id,
                    kind=scanned.kind,
                    filename=scanned.name,
                    rank=position,
                )
                by_filename[scanned.name] = item
                self.plan.creates.append(item)
            elif item.rank != position:
                self.plan.updates.append(item.model_copy(update={"rank": position}))

            self.seen_items.add(item.id)

    def _protect_providers(self, providers: List[Row]) -> None:
        for provider in providers:
            self.seen_providers.add(provider.id)
            self._protect_courses(self.courses_by_provider[provider.id])

    def _protect_courses(self, courses: List[Row]) -> None:
        for course in courses:
            self.seen_courses.add(course.id)
            self.seen_items.update(i.id for i in self.items_by_course[course.id])

    def _collect_garbage(self, matched_category_ids: Set[str]) -> None:
        doomed: Dict[Tuple[str, str], None] = {}

        def drop_course(course: Row) -> None:
            for item in self.items_by_course[course.id]:
                doomed[("items", item.id)] = None
            doomed[("courses", course.id)] = None

        for provider in self.snapshot.providers:
            if provider.category_id in matched_category_ids and provider.id not in self.seen_providers:
                for course in self.courses_by_provider[provider.id]:
                    drop_course(course)
                doomed[("providers", provider.id)] = None

        for course in self.snapshot.courses:
            if course.provider_id in self.seen_providers and course.id not in self.seen_courses:
                drop_course(course)

        for item in self.snapshot.items:
            if item.course_id in self.seen_courses and item.id not in self.seen_items:
                doomed[("items", item.id)] = None

        order = {"items": 0, "courses": 1, "providers": 2}
        self.plan.deletes = sorted(doomed, key=lambda key: order[key[0]])


def plan_reconcile(
    snapshot: CatalogSnapshot,
    tree: ScanTree,
    matches: Mapping[str, str],
    id_factory: Callable[[], str] = generate_id,
) -> ReconcilePlan:
    """
    Compute the operations that make the catalog mirror `tree`.

    Args:
        snapshot: Stored rows before the pass
        tree: Result of the directory walk
        matches: Top-level folder name -> category id, matched folders only
        id_factory: Identifier generator for new rows

    Returns:
        The ordered plan; garbage collection is limited to matched categories
    """
    return _Planner(snapshot, id_factory).run(tree, matches)

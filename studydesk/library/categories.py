# studydesk/library/categories.py
"""
Category seeding and folder-name matching.

Categories are a fixed set, defined in configs/categories.yaml and seeded into
an empty catalog. Top-level folders are matched against them by name; a
folder that matches nothing is skipped, never turned into a new category.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import anyio
import yaml

from ..models.catalog import Category
from ..models.scan import DiagnosticKind, ScanDiagnostic, ScanTree
from ..store.base import CatalogStore
from .classify import normalize_name


logger = logging.getLogger(__name__)


DEFAULT_CATEGORIES: List[Dict[str, Any]] = [
    {"id": "gs1", "name": "GS1", "full_name": "General Studies 1", "icon": "📚"},
    {"id": "gs2", "name": "GS2", "full_name": "General Studies 2", "icon": "📖"},
    {"id": "gs3", "name": "GS3", "full_name": "General Studies 3", "icon": "📕"},
    {"id": "gs4", "name": "GS4", "full_name": "General Studies 4 (Ethics)", "icon": "📗"},
    {"id": "csat", "name": "CSAT", "full_name": "Civil Services Aptitude Test", "icon": "📘"},
    {"id": "optional", "name": "Optional", "full_name": "Optional Subject", "icon": "📙"},
    {"id": "extra", "name": "Extra", "full_name": "Additional Resources", "icon": "📓"},
]


def _family(category_id: str) -> str:
    """Category family: the normalised id without its trailing number."""
    return re.sub(r"\d+$", "", normalize_name(category_id))


def match_category(folder_name: str, categories: List[Category]) -> Optional[str]:
    """
    Match a top-level folder name to a category id.

    Handles variations like "GS 1", "gs-1", "GS_1", "General Studies 1" and
    "GS Paper 1". Tried in order: id, short name, full name, then the family
    pattern (known prefix, optional "paper", optional digits). First match
    wins.

    Returns:
        The category id, or None when the folder should be skipped
    """
    normalized = normalize_name(folder_name)
    if not normalized:
        return None

    for attribute in ("id", "name", "full_name"):
        for category in categories:
            if normalize_name(getattr(category, attribute)) == normalized:
                return category.id

    families = sorted({_family(c.id) for c in categories if _family(c.id)}, key=len, reverse=True)
    if not families:
        return None

    pattern = re.compile(
        r"^(?P<family>" + "|".join(re.escape(f) for f in families) + r")(?:paper)?(?P<number>\d*)$"
    )
    found = pattern.match(normalized)
    if not found:
        return None

    # Strip leading zeros so "GS 01" still lands on gs1
    number = found.group("number").lstrip("0") or found.group("number")
    candidate = found.group("family") + number
    for category in categories:
        if normalize_name(category.id) == candidate:
            return category.id

    return None


def match_scan_tree(
    tree: ScanTree, categories: List[Category]
) -> Tuple[Dict[str, str], List[ScanDiagnostic]]:
    """
    Match every top-level folder of a scan.

    Returns:
        (folder name -> category id, skip diagnostics for unmatched folders)
    """
    matches: Dict[str, str] = {}
    skipped: List[ScanDiagnostic] = []

    for folder_name in tree.categories:
        category_id = match_category(folder_name, categories)
        if category_id is None:
            logger.info("Skipping unknown category folder: %s", folder_name)
            skipped.append(
                ScanDiagnostic(
                    kind=DiagnosticKind.UNMATCHED_FOLDER,
                    path=folder_name,
                    message="Folder name does not match any category",
                )
            )
            continue

        logger.debug("Matched folder %r to category %s", folder_name, category_id)
        matches[folder_name] = category_id

    return matches, skipped


class CategoryManager:
    """Seed and load the fixed category set."""

    def __init__(self, store: CatalogStore, seed_file: Optional[str] = None):
        self.store = store
        self.seed_file = seed_file

    async def load_seed(self) -> List[Category]:
        """
        Load the category definitions to seed with.

        Returns:
            Categories from the seed file, or the built-in set when the
            file is absent
        """
        entries = DEFAULT_CATEGORIES

        if self.seed_file:
            seed_path = anyio.Path(self.seed_file)
            if await seed_path.exists():
                text = await seed_path.read_text()
                data = await anyio.to_thread.run_sync(yaml.safe_load, text) or {}
                entries = data.get("categories", []) or DEFAULT_CATEGORIES

        return [
            Category(**{**entry, "rank": entry.get("rank", index)})
            for index, entry in enumerate(entries)
        ]

    async def seed(self) -> int:
        """
        Seed categories into an empty catalog.

        Returns:
            Number of categories written (0 when already seeded)
        """
        if await self.store.count("categories") > 0:
            return 0

        categories = await self.load_seed()
        for category in categories:
            await self.store.put("categories", category)

        logger.info("Seeded %d categories", len(categories))
        return len(categories)

    async def load_categories(self) -> List[Category]:
        """All categories ordered by rank."""
        categories = await self.store.get_all("categories")
        return sorted(categories, key=lambda c: c.rank)

    async def get_category(self, category_id: str) -> Optional[Category]:
        return await self.store.get("categories", category_id)

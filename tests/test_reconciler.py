# tests/test_reconciler.py
"""Tests for reconciling the catalog with the master folder."""

import shutil

import anyio
import pytest

from studydesk.catalog.state import CatalogState
from studydesk.errors import PermissionDeniedError
from studydesk.fs.capability import DirRef, PermissionState
from studydesk.library.categories import CategoryManager
from studydesk.models.catalog import MediaKind
from studydesk.models.scan import (
    CategoryNode,
    CourseNode,
    DiagnosticKind,
    ProviderNode,
    ScannedFile,
    ScanTree,
)
from studydesk.sync.reconciler import Reconciler
from studydesk.sync.service import SyncService

from conftest import FakeCapability, build_tree, make_root


def _service(store, capability):
    state = CatalogState(store)
    return SyncService(make_root(store, capability), CategoryManager(store), state)


async def _items_by_filename(store):
    return {i.filename: i for i in await store.get_all("items")}


# =============================================================================
# Round trip and idempotence
# =============================================================================


@pytest.mark.asyncio
async def test_first_sync_mirrors_matched_folders(seeded_store, capability):
    report = await _service(seeded_store, capability).sync()

    assert report.counts() == {"created": 13, "updated": 0, "deleted": 0}
    assert report.failed == 0
    assert report.skipped_folders == ["Random Stuff"]

    providers = {p.name: p for p in await seeded_store.get_all("providers")}
    assert set(providers) == {"Vision IAS", "Forum", "Unacademy"}
    assert providers["Unacademy"].category_id == "csat"

    courses = {c.name: c for c in await seeded_store.get_all("courses")}
    assert courses["Polity"].source_path == "GS 1/Vision IAS/Polity"

    items = await _items_by_filename(seeded_store)
    assert set(items) == {
        "01_Introduction.mp4",
        "02_Preamble.mp4",
        "10_Summary.pdf",
        "1 Harappa.mkv",
        "Rivers.webm",
        "Puzzles.pdf",
    }
    summary = items["10_Summary.pdf"]
    assert (summary.rank, summary.kind, summary.title) == (2, MediaKind.DOCUMENT, "10 Summary")
    assert summary.completed is False and summary.last_position == 0


@pytest.mark.asyncio
async def test_second_pass_is_idempotent(seeded_store, capability):
    service = _service(seeded_store, capability)
    await service.sync()
    before = {i.id for i in await seeded_store.get_all("items")}

    report = await service.sync()

    assert report.counts() == {"created": 0, "updated": 0, "deleted": 0}
    assert {i.id for i in await seeded_store.get_all("items")} == before


@pytest.mark.asyncio
async def test_round_trip_preserves_identity_for_renamed_parent_case(seeded_store, library):
    service = _service(seeded_store, FakeCapability(library))
    await service.sync()
    polity = next(c for c in await seeded_store.get_all("courses") if c.name == "Polity")

    (library / "GS 1" / "Vision IAS" / "Polity").rename(library / "GS 1" / "Vision IAS" / "POLITY")
    report = await service.sync()

    renamed = await seeded_store.get("courses", polity.id)
    assert renamed.source_path == "GS 1/Vision IAS/POLITY"
    assert report.counts() == {"created": 0, "updated": 1, "deleted": 0}


# =============================================================================
# Deletion propagation
# =============================================================================


@pytest.mark.asyncio
async def test_removed_course_deletes_its_items(seeded_store, library):
    service = _service(seeded_store, FakeCapability(library))
    await service.sync()

    shutil.rmtree(library / "GS 1" / "Vision IAS" / "Polity")
    report = await service.sync()

    assert report.deleted == 4
    assert "Polity" not in {c.name for c in await seeded_store.get_all("courses")}
    assert "01_Introduction.mp4" not in await _items_by_filename(seeded_store)


@pytest.mark.asyncio
async def test_removed_provider_cascades(seeded_store, library):
    service = _service(seeded_store, FakeCapability(library))
    await service.sync()

    shutil.rmtree(library / "GS 1" / "Vision IAS")
    report = await service.sync()

    # provider + 2 courses + 4 items
    assert report.deleted == 7
    assert {p.name for p in await seeded_store.get_all("providers")} == {"Forum", "Unacademy"}
    assert await seeded_store.count("items") == 2


@pytest.mark.asyncio
async def test_removed_file_deletes_item_and_reranks(seeded_store, library):
    service = _service(seeded_store, FakeCapability(library))
    await service.sync()

    (library / "GS 1" / "Vision IAS" / "Polity" / "01_Introduction.mp4").unlink()
    report = await service.sync()

    items = await _items_by_filename(seeded_store)
    assert report.counts() == {"created": 0, "updated": 2, "deleted": 1}
    assert items["02_Preamble.mp4"].rank == 0
    assert items["10_Summary.pdf"].rank == 1


@pytest.mark.asyncio
async def test_categories_are_never_deleted(seeded_store, library):
    service = _service(seeded_store, FakeCapability(library))
    await service.sync()

    shutil.rmtree(library / "CSAT")
    await service.sync()

    assert await seeded_store.count("categories") == 7
    # A category folder missing from disk leaves its stored subtree alone
    assert "Unacademy" in {p.name for p in await seeded_store.get_all("providers")}


# =============================================================================
# Unmatched folders and failed branches
# =============================================================================


@pytest.mark.asyncio
async def test_unmatched_top_folder_is_skipped(seeded_store, capability):
    report = await _service(seeded_store, capability).sync()

    assert "Someone" not in {p.name for p in await seeded_store.get_all("providers")}
    skipped = [d for d in report.diagnostics if d.kind == DiagnosticKind.UNMATCHED_FOLDER]
    assert [d.path for d in skipped] == ["Random Stuff"]


@pytest.mark.asyncio
async def test_unreadable_branch_keeps_existing_rows(seeded_store, capability):
    service = _service(seeded_store, capability)
    await service.sync()
    count = await seeded_store.count("items")

    capability.failing["GS 1/Vision IAS"] = PermissionError("denied")
    report = await service.sync()

    assert report.failed_branches == ["GS 1/Vision IAS"]
    assert report.deleted == 0
    assert await seeded_store.count("items") == count


@pytest.mark.asyncio
async def test_permission_revoked_aborts_without_writes(seeded_store, capability):
    service = _service(seeded_store, capability)
    await service.sync()
    count = await seeded_store.count("items")

    capability.permission = PermissionState.DENIED
    with pytest.raises(PermissionDeniedError):
        await service.sync()

    assert await seeded_store.count("items") == count


@pytest.mark.asyncio
async def test_no_root_is_a_noop(seeded_store):
    service = _service(seeded_store, None)

    report = await service.sync()

    assert report.counts() == {"created": 0, "updated": 0, "deleted": 0}
    assert [d.kind for d in report.diagnostics] == [DiagnosticKind.NO_ROOT]


# =============================================================================
# User state
# =============================================================================


@pytest.mark.asyncio
async def test_user_state_survives_resync(seeded_store, library):
    service = _service(seeded_store, FakeCapability(library))
    await service.sync()
    item = (await _items_by_filename(seeded_store))["02_Preamble.mp4"]
    await seeded_store.put(
        "items", item.model_copy(update={"completed": True, "last_position": 321.0})
    )

    # Reorder by adding a file that sorts first
    (library / "GS 1" / "Vision IAS" / "Polity" / "00_Welcome.mp4").write_bytes(b"x")
    await service.sync()

    after = await seeded_store.get("items", item.id)
    assert after.completed is True
    assert after.last_position == 321.0
    assert after.rank == 2


@pytest.mark.asyncio
async def test_sync_invalidates_cache(seeded_store, library):
    capability = FakeCapability(library)
    service = _service(seeded_store, capability)
    await service.sync()
    course = next(c for c in await seeded_store.get_all("courses") if c.name == "Geography")
    assert len(await service.state.get_items(course.id)) == 1

    (library / "GS 1" / "Forum" / "Geography" / "Seas.webm").write_bytes(b"x")
    await service.sync()

    assert len(await service.state.get_items(course.id)) == 2


# =============================================================================
# Integrity checks
# =============================================================================


@pytest.mark.asyncio
async def test_integrity_failure_aborts_only_that_row(seeded_store):
    tree = ScanTree(root_name="lib")
    cat_ref = DirRef(("GS1",))
    category = CategoryNode(name="GS1", ref=cat_ref)
    tree.categories["GS1"] = category
    for provider_name in ("Vision", "   "):
        ref = cat_ref.child(provider_name)
        course_ref = ref.child("Polity")
        category.providers[provider_name] = ProviderNode(
            name=provider_name,
            ref=ref,
            courses={
                "Polity": CourseNode(
                    name="Polity",
                    ref=course_ref,
                    files=[ScannedFile("a.mp4", MediaKind.VIDEO, course_ref.file("a.mp4"))],
                )
            },
        )

    report = await Reconciler(CatalogState(seeded_store)).reconcile(tree, {"GS1": "gs1"})

    # The blank provider fails, and so do the course and item that hang off it
    assert report.created == 3
    assert report.failed == 3
    assert {d.kind for d in report.diagnostics} == {DiagnosticKind.INTEGRITY_VIOLATION}
    assert [p.name for p in await seeded_store.get_all("providers")] == ["Vision"]


@pytest.mark.asyncio
async def test_concurrent_syncs_are_serialised(seeded_store, capability):
    service = _service(seeded_store, capability)
    reports = []

    async def run():
        reports.append(await service.sync())

    async with anyio.create_task_group() as tg:
        tg.start_soon(run)
        tg.start_soon(run)

    assert sorted(r.created for r in reports) == [0, 13]
    assert await seeded_store.count("items") == 6


@pytest.mark.asyncio
async def test_new_tree_after_first_sync(seeded_store, tmp_path):
    root = build_tree(tmp_path / "other", {"GS2": {"Forum": {"Economy": ["1.mp4"]}}})
    service = _service(seeded_store, FakeCapability(root))

    report = await service.sync()

    assert report.created == 3
    provider = (await seeded_store.get_all("providers"))[0]
    assert provider.category_id == "gs2"

# tests/test_library_root.py
"""Tests for master folder selection and restore."""

import pytest

from studydesk.errors import PermissionDeniedError, RootNotConfiguredError
from studydesk.fs.capability import LocalDirectoryCapability
from studydesk.library.root import ROOT_CONFIG_KEY, LibraryRoot
from studydesk.models.catalog import ConfigEntry


@pytest.mark.asyncio
async def test_no_root_until_selected(store):
    root = LibraryRoot(store)

    assert root.has_root is False
    assert root.name is None
    with pytest.raises(RootNotConfiguredError):
        root.require()


@pytest.mark.asyncio
async def test_select_persists_root(store, library):
    root = LibraryRoot(store)

    capability = await root.select(str(library))

    assert root.has_root
    assert root.name == "library"
    assert root.require() is capability
    entry = await store.get("config", ROOT_CONFIG_KEY)
    assert entry.value["path"] == str(library)


@pytest.mark.asyncio
async def test_select_missing_folder_is_denied(store, tmp_path):
    root = LibraryRoot(store)

    with pytest.raises(PermissionDeniedError):
        await root.select(str(tmp_path / "nowhere"))

    assert root.has_root is False
    assert await store.get("config", ROOT_CONFIG_KEY) is None


@pytest.mark.asyncio
async def test_restore_after_restart(store, library):
    await LibraryRoot(store, follow_symlinks=True).select(str(library))

    restarted = LibraryRoot(store)
    assert await restarted.restore() is True

    assert isinstance(restarted.capability, LocalDirectoryCapability)
    assert restarted.capability.follow_symlinks is True
    assert restarted.name == "library"


@pytest.mark.asyncio
async def test_restore_behaves_as_no_root_when_access_lost(store, library, tmp_path):
    moved = tmp_path / "moved"
    await LibraryRoot(store).select(str(library))
    library.rename(moved)

    restarted = LibraryRoot(store)

    assert await restarted.restore() is False
    assert restarted.has_root is False


@pytest.mark.asyncio
async def test_restore_ignores_unreadable_config(store):
    await store.put("config", ConfigEntry(id=ROOT_CONFIG_KEY, value={"kind": "cloud"}))

    assert await LibraryRoot(store).restore() is False


@pytest.mark.asyncio
async def test_request_permission_reactivates_saved_root(store, library, tmp_path):
    moved = tmp_path / "moved"
    await LibraryRoot(store).select(str(library))
    library.rename(moved)
    restarted = LibraryRoot(store)
    await restarted.restore()

    assert await restarted.request_permission() is False

    moved.rename(library)
    assert await restarted.request_permission() is True
    assert restarted.has_root


@pytest.mark.asyncio
async def test_request_permission_without_any_root(store):
    with pytest.raises(RootNotConfiguredError):
        await LibraryRoot(store).request_permission()

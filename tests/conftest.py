# tests/conftest.py
"""Shared fixtures: directory trees, stores and controllable capabilities."""

from pathlib import Path
from typing import Dict, List, Optional, Set, Union

import anyio
import anyio.lowlevel
import pytest
import pytest_asyncio

from studydesk.catalog.state import CatalogState
from studydesk.config import Config
from studydesk.container import assemble_services
from studydesk.fs.capability import (
    ByteStream,
    DirectoryCapability,
    DirEntry,
    DirRef,
    FileRef,
    LocalDirectoryCapability,
    PermissionMode,
    PermissionState,
)
from studydesk.library.categories import CategoryManager
from studydesk.library.root import LibraryRoot
from studydesk.store.memory import MemoryCatalogStore


Layout = Dict[str, Union["Layout", List[str]]]


def build_tree(root: Path, layout: Layout) -> Path:
    """
    Create folders and files from a nested dict.

    Dict values are sub-folders; list values are file names created with a
    few bytes of content inside that folder.
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        path = root / name
        if isinstance(value, dict):
            build_tree(path, value)
        else:
            path.mkdir(parents=True, exist_ok=True)
            for filename in value:
                (path / filename).write_bytes(b"data:" + filename.encode())
    return root


class FakeCapability(DirectoryCapability):
    """
    Local capability with knobs for failures and suspension.

    `failing` maps a directory path to the exception its listing raises.
    `gates` holds events that listing (or opening a file under) a path
    waits on before continuing.
    """

    kind = "fake"

    def __init__(self, root_path: Path):
        self.inner = LocalDirectoryCapability(root_path)
        self.permission = PermissionState.GRANTED
        self.failing: Dict[str, OSError] = {}
        self.gates: Dict[str, anyio.Event] = {}
        self.listed: List[str] = []
        self.opened: List[str] = []
        self.closed: Set[str] = set()

    @property
    def name(self) -> str:
        return self.inner.name

    async def _wait(self, path: str) -> None:
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()

    async def list_entries(self, dir_ref: DirRef) -> List[DirEntry]:
        self.listed.append(dir_ref.path)
        await self._wait(dir_ref.path)
        if dir_ref.path in self.failing:
            raise self.failing[dir_ref.path]
        return await self.inner.list_entries(dir_ref)

    async def get_or_create_subdirectory(
        self, parent: DirRef, name: str, create: bool = True
    ) -> DirRef:
        return await self.inner.get_or_create_subdirectory(parent, name, create=create)

    async def open_file(self, file_ref: FileRef) -> ByteStream:
        await self._wait(file_ref.path)
        stream = await self.inner.open_file(file_ref)
        self.opened.append(file_ref.path)
        return _TrackedStream(stream, file_ref.path, self.closed)

    async def query_permission(self, mode: PermissionMode = PermissionMode.READ) -> PermissionState:
        await anyio.lowlevel.checkpoint()
        return self.permission

    def to_config(self) -> dict:
        return self.inner.to_config()


class _TrackedStream:
    def __init__(self, stream: ByteStream, path: str, closed: Set[str]):
        self.stream = stream
        self.path = path
        self.closed = closed

    async def read(self, size: int = -1) -> bytes:
        return await self.stream.read(size)

    async def aclose(self) -> None:
        await self.stream.aclose()
        self.closed.add(self.path)


SAMPLE_LAYOUT: Layout = {
    "GS 1": {
        "Vision IAS": {
            "Polity": ["01_Introduction.mp4", "02_Preamble.mp4", "10_Summary.pdf"],
            "History": ["1 Harappa.mkv", "notes.txt"],
        },
        "Forum": {
            "Geography": ["Rivers.webm"],
        },
    },
    "CSAT": {
        "Unacademy": {
            "Reasoning": ["Puzzles.pdf"],
        },
    },
    "Random Stuff": {
        "Someone": {
            "Something": ["video.mp4"],
        },
    },
}


@pytest.fixture
def library(tmp_path) -> Path:
    """A master folder populated with SAMPLE_LAYOUT."""
    return build_tree(tmp_path / "library", SAMPLE_LAYOUT)


@pytest.fixture
def capability(library) -> FakeCapability:
    return FakeCapability(library)


@pytest.fixture
def store() -> MemoryCatalogStore:
    return MemoryCatalogStore()


@pytest_asyncio.fixture
async def seeded_store(store) -> MemoryCatalogStore:
    """Memory store holding the built-in categories."""
    await CategoryManager(store, seed_file=None).seed()
    return store


@pytest.fixture
def state(seeded_store) -> CatalogState:
    return CatalogState(seeded_store)


@pytest_asyncio.fixture
async def services(seeded_store, capability):
    """Services over a memory store with the fake capability as root."""
    services = assemble_services(Config(), seeded_store)
    await services.root.adopt(capability)
    yield services
    await services.study.close()


def make_root(store, capability: Optional[DirectoryCapability]) -> LibraryRoot:
    root = LibraryRoot(store)
    root.capability = capability
    return root

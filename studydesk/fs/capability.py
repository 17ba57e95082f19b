# studydesk/fs/capability.py
"""
Permission-scoped access to the master folder.

A capability hands out opaque references (DirRef / FileRef) relative to its
root. Nothing outside the root is reachable through it.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Protocol

import anyio


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class PermissionMode(str, Enum):
    READ = "read"
    READWRITE = "readwrite"


class PermissionState(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"


def _check_name(name: str) -> str:
    if not name or name in (".", "..") or "/" in name:
        raise ValueError(f"Invalid entry name: {name!r}")
    return name


@dataclass(frozen=True)
class DirRef:
    """Directory reference; the empty tuple is the root."""

    parts: tuple[str, ...] = ()

    @classmethod
    def from_path(cls, path: str) -> "DirRef":
        """Build a reference from a slash-delimited path like 'GS 1/Vision/Polity'."""
        return cls(tuple(_check_name(p) for p in path.split("/") if p))

    @property
    def name(self) -> str:
        return self.parts[-1] if self.parts else ""

    @property
    def path(self) -> str:
        return "/".join(self.parts)

    def child(self, name: str) -> "DirRef":
        return DirRef(self.parts + (_check_name(name),))

    def file(self, name: str) -> "FileRef":
        return FileRef(self, _check_name(name))


@dataclass(frozen=True)
class FileRef:
    parent: DirRef
    name: str

    @property
    def path(self) -> str:
        return f"{self.parent.path}/{self.name}" if self.parent.parts else self.name


@dataclass(frozen=True)
class DirEntry:
    name: str
    kind: EntryKind


class ByteStream(Protocol):
    """Async readable byte stream handed out by open_file."""

    async def read(self, size: int = -1) -> bytes: ...

    async def aclose(self) -> None: ...


class DirectoryCapability(ABC):
    """Listing, sub-directory creation and file-open primitives over one root."""

    kind: str = "abstract"

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name of the root folder."""

    def root(self) -> DirRef:
        return DirRef()

    @abstractmethod
    async def list_entries(self, dir_ref: DirRef) -> List[DirEntry]:
        """List the direct children of a directory."""

    @abstractmethod
    async def get_or_create_subdirectory(
        self, parent: DirRef, name: str, create: bool = True
    ) -> DirRef:
        """Return a child directory, creating it when `create` is set."""

    @abstractmethod
    async def open_file(self, file_ref: FileRef) -> ByteStream:
        """Open a file for reading."""

    @abstractmethod
    async def query_permission(self, mode: PermissionMode = PermissionMode.READ) -> PermissionState:
        """Report current access without prompting."""

    async def request_permission(self, mode: PermissionMode = PermissionMode.READ) -> PermissionState:
        """Ask for access. Capabilities that cannot prompt just re-query."""
        return await self.query_permission(mode)

    @abstractmethod
    def to_config(self) -> Dict[str, Any]:
        """Serialise into a config row."""


class LocalDirectoryCapability(DirectoryCapability):
    """Capability over a directory on the local filesystem."""

    kind = "local"

    def __init__(self, root_path: str | Path, follow_symlinks: bool = False):
        self.root_path = Path(root_path)
        self.follow_symlinks = follow_symlinks

    @property
    def name(self) -> str:
        return self.root_path.name or str(self.root_path)

    def _dir_path(self, ref: DirRef) -> anyio.Path:
        return anyio.Path(self.root_path.joinpath(*ref.parts))

    def _file_path(self, ref: FileRef) -> anyio.Path:
        return self._dir_path(ref.parent) / ref.name

    async def list_entries(self, dir_ref: DirRef) -> List[DirEntry]:
        entries = []
        async for child in self._dir_path(dir_ref).iterdir():
            if not self.follow_symlinks and await child.is_symlink():
                continue
            if await child.is_dir():
                entries.append(DirEntry(child.name, EntryKind.DIRECTORY))
            elif await child.is_file():
                entries.append(DirEntry(child.name, EntryKind.FILE))
        return entries

    async def get_or_create_subdirectory(
        self, parent: DirRef, name: str, create: bool = True
    ) -> DirRef:
        ref = parent.child(name)
        path = self._dir_path(ref)

        if await path.exists():
            if not await path.is_dir():
                raise NotADirectoryError(f"Not a directory: {ref.path}")
            return ref

        if not create:
            raise FileNotFoundError(f"Folder not found: {ref.path}")

        await path.mkdir(parents=True, exist_ok=True)
        return ref

    async def open_file(self, file_ref: FileRef) -> ByteStream:
        return await anyio.open_file(self._file_path(file_ref), "rb")

    async def query_permission(self, mode: PermissionMode = PermissionMode.READ) -> PermissionState:
        flags = os.R_OK | os.X_OK
        if mode == PermissionMode.READWRITE:
            flags |= os.W_OK

        def _check() -> bool:
            return self.root_path.is_dir() and os.access(self.root_path, flags)

        granted = await anyio.to_thread.run_sync(_check)
        return PermissionState.GRANTED if granted else PermissionState.DENIED

    def to_config(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "path": str(self.root_path),
            "name": self.name,
            "follow_symlinks": self.follow_symlinks,
        }

    @classmethod
    def from_config(cls, data: Dict[str, Any]) -> "LocalDirectoryCapability":
        return cls(data["path"], follow_symlinks=bool(data.get("follow_symlinks", False)))


def capability_from_config(data: Dict[str, Any]) -> DirectoryCapability:
    """Rebuild a capability from its serialised config row."""
    kind = data.get("kind")
    if kind == LocalDirectoryCapability.kind:
        return LocalDirectoryCapability.from_config(data)
    raise ValueError(f"Unknown capability kind: {kind!r}")

"""Directory capability over the master folder."""

from .capability import (
    ByteStream,
    DirectoryCapability,
    DirEntry,
    DirRef,
    EntryKind,
    FileRef,
    LocalDirectoryCapability,
    PermissionMode,
    PermissionState,
    capability_from_config,
)

__all__ = [
    "ByteStream",
    "DirectoryCapability",
    "DirEntry",
    "DirRef",
    "EntryKind",
    "FileRef",
    "LocalDirectoryCapability",
    "PermissionMode",
    "PermissionState",
    "capability_from_config",
]

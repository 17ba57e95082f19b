# studydesk/library/classify.py
"""
Filename helpers shared by the scanner and the live resolver.

Classification is by extension only; file contents are never inspected.
"""

import re
from typing import Any, Iterable, Optional

from ..models.catalog import MediaKind


DEFAULT_VIDEO_EXTENSIONS = (".mp4", ".mkv", ".webm")
DEFAULT_DOCUMENT_EXTENSIONS = (".pdf",)


class FileClassifier:
    """Map a filename to a MediaKind using an extension allow-list."""

    def __init__(
        self,
        video_extensions: Iterable[str] = DEFAULT_VIDEO_EXTENSIONS,
        document_extensions: Iterable[str] = DEFAULT_DOCUMENT_EXTENSIONS,
    ):
        self.video_extensions = {_dotted(e) for e in video_extensions}
        self.document_extensions = {_dotted(e) for e in document_extensions}

    def classify(self, filename: str) -> Optional[MediaKind]:
        if "." not in filename:
            return None
        ext = "." + filename.rsplit(".", 1)[1].lower()

        if ext in self.video_extensions:
            return MediaKind.VIDEO
        if ext in self.document_extensions:
            return MediaKind.DOCUMENT
        return None


def _dotted(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith(".") else f".{ext}"


def natural_key(name: str) -> tuple[Any, ...]:
    """Sort key comparing digit runs numerically, so '2' sorts before '10'."""
    parts: list[Any] = []
    for p in re.split(r"(\d+)", name.casefold()):
        if not p:
            continue
        # Tag each part so int and str never get compared directly
        parts.append((0, int(p), "") if p.isdigit() else (1, 0, p))
    return tuple(parts), name


def title_from_filename(filename: str) -> str:
    """
    Derive a display title from a filename.

    "01_Introduction_to_Polity.mp4" -> "01 Introduction to Polity"
    """
    stem = re.sub(r"\.[^/.]+$", "", filename)
    cleaned = re.sub(r"[_-]", " ", stem)
    return re.sub(r"\s+", " ", cleaned).strip() or filename


def normalize_name(name: str) -> str:
    """Lower-case and drop whitespace, hyphens and underscores ("GS-1" -> "gs1")."""
    return re.sub(r"[\s\-_]", "", name.lower())

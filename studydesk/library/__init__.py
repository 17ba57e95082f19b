"""Master folder access, scanning and category matching."""

from .categories import CategoryManager, match_category, match_scan_tree
from .classify import FileClassifier, natural_key, normalize_name, title_from_filename
from .root import LibraryRoot
from .scanner import DirectoryScanner, list_classified_files

__all__ = [
    "CategoryManager",
    "match_category",
    "match_scan_tree",
    "FileClassifier",
    "natural_key",
    "normalize_name",
    "title_from_filename",
    "LibraryRoot",
    "DirectoryScanner",
    "list_classified_files",
]

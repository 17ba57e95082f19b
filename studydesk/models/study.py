# studydesk/models/study.py

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .catalog import Item
from .scan import ScannedFile


class OpenOutcome(str, Enum):
    OPENED = "opened"
    NOT_FOUND = "not_found"        # Item exists, backing file does not
    MISSING_ITEM = "missing_item"  # No such item in the catalog
    STALE = "stale"                # Superseded by a newer open/close
    TIMED_OUT = "timed_out"


@dataclass
class OpenResult:
    token: int
    outcome: OpenOutcome
    item: Optional[Item] = None
    file: Optional[ScannedFile] = None

    @property
    def should_render(self) -> bool:
        return self.outcome in (OpenOutcome.OPENED, OpenOutcome.NOT_FOUND)

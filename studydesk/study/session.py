# studydesk/study/session.py
"""
Study view session: opening an item, tracking its position, leaving it.

Open requests can overlap (a user clicking quickly through a course). The
newest request wins: older ones are cancelled and never write anything after
they have been superseded.
"""

import logging
from datetime import datetime
from typing import Optional, Protocol

import anyio

from ..catalog.state import CatalogState
from ..fs.capability import ByteStream
from ..library.root import LibraryRoot
from ..models.catalog import Item
from ..models.scan import ScannedFile
from ..models.study import OpenOutcome, OpenResult
from .guard import SessionGuard
from .resolver import LiveResolver


logger = logging.getLogger(__name__)


class MediaEngine(Protocol):
    """Player or document viewer bound to the open item."""

    def position(self) -> float: ...

    async def detach(self) -> None: ...


class StudySession:
    """Holds the open item and runs the open/position/close workflow."""

    def __init__(
        self,
        state: CatalogState,
        resolver: LiveResolver,
        root: LibraryRoot,
        guard: Optional[SessionGuard] = None,
        open_timeout: Optional[float] = None,
    ):
        self.state = state
        self.resolver = resolver
        self.root = root
        self.guard = guard or SessionGuard()
        self.open_timeout = open_timeout

        self.current_item: Optional[Item] = None
        self.current_file: Optional[ScannedFile] = None
        self.stream: Optional[ByteStream] = None
        self.media: Optional[MediaEngine] = None
        self.last_position: float = 0

    def attach_media(self, engine: MediaEngine) -> None:
        self.media = engine

    def position(self) -> float:
        """Last known position, preferring the attached media engine."""
        if self.media is not None:
            return self.media.position()
        return self.last_position

    async def open_item(self, item_id: str) -> OpenResult:
        """
        Open an item, superseding any open in progress.

        The previous item's position is saved (best-effort) and its
        resources released before the new item is loaded.

        Returns:
            OpenResult; STALE when a newer open or a close won the race
        """
        token, scope = self.guard.begin(self.open_timeout)
        await self._leave_current()

        result: Optional[OpenResult] = None
        try:
            with scope:
                result = await self._open(token, item_id)
        finally:
            self.guard.release(scope)

        if result is not None:
            return result

        if self.guard.is_current(token):
            logger.warning("Opening item %s timed out after %ss", item_id, self.open_timeout)
            return OpenResult(token=token, outcome=OpenOutcome.TIMED_OUT)

        logger.debug("Open of item %s cancelled by a newer request", item_id)
        return OpenResult(token=token, outcome=OpenOutcome.STALE)

    async def _open(self, token: int, item_id: str) -> OpenResult:
        def stale() -> OpenResult:
            logger.debug("Discarding stale session %d for item %s", token, item_id)
            return OpenResult(token=token, outcome=OpenOutcome.STALE)

        item = await self.state.get_item(item_id)
        if not self.guard.is_current(token):
            return stale()
        if item is None:
            return OpenResult(token=token, outcome=OpenOutcome.MISSING_ITEM)

        capability = self.root.capability
        scanned = None
        if capability is not None:
            scanned = await self.resolver.resolve(
                item, capability, lambda: self.guard.is_current(token)
            )
            if not self.guard.is_current(token):
                return stale()

        if scanned is None:
            self.current_item = item
            self.last_position = item.last_position
            return OpenResult(token=token, outcome=OpenOutcome.NOT_FOUND, item=item)

        try:
            stream = await capability.open_file(scanned.ref)
        except OSError as e:
            logger.warning("Could not open %s: %s", scanned.ref.path, e)
            if not self.guard.is_current(token):
                return stale()
            self.current_item = item
            self.last_position = item.last_position
            return OpenResult(token=token, outcome=OpenOutcome.NOT_FOUND, item=item)

        committed = False
        try:
            if not self.guard.is_current(token):
                return stale()

            updated = await self.state.update_item(
                item.id,
                is_current=lambda: self.guard.is_current(token),
                last_opened_at=datetime.now(),
            )
            if not self.guard.is_current(token):
                return stale()
            if updated is None:
                return OpenResult(token=token, outcome=OpenOutcome.MISSING_ITEM)

            self.current_item = updated
            self.current_file = scanned
            self.stream = stream
            self.last_position = updated.last_position
            committed = True
            return OpenResult(token=token, outcome=OpenOutcome.OPENED, item=updated, file=scanned)
        finally:
            if not committed:
                await _close_stream(stream)

    async def save_position(self, position: float, token: Optional[int] = None) -> bool:
        """
        Persist the open item's position.

        Returns:
            False when nothing is open or the session was superseded
        """
        token = self.guard.current if token is None else token
        item = self.current_item
        if item is None or not self.guard.is_current(token):
            return False

        self.last_position = position
        updated = await self.state.update_item(
            item.id,
            is_current=lambda: self.guard.is_current(token),
            last_position=position,
        )
        if updated is None or not self.guard.is_current(token):
            return False

        self.current_item = updated
        return True

    async def open_next(self) -> Optional[OpenResult]:
        """Open the next incomplete item of the current course."""
        if self.current_item is None:
            return None

        following = await self.state.next_incomplete_item(self.current_item)
        if following is None:
            return None
        return await self.open_item(following.id)

    async def close(self) -> None:
        """Leave the study view, cancelling any open in progress."""
        self.guard.invalidate()
        await self._leave_current()

    async def _leave_current(self) -> None:
        item, self.current_item = self.current_item, None
        try:
            if item is not None:
                try:
                    await self.state.update_item(item.id, last_position=self.position())
                except Exception:
                    logger.warning("Could not save position for %s", item.id, exc_info=True)
        finally:
            await self.cleanup()

    async def cleanup(self) -> None:
        """Release the media engine and byte stream; each step stands alone."""
        media, self.media = self.media, None
        if media is not None:
            try:
                await media.detach()
            except Exception:
                logger.warning("Media engine detach failed", exc_info=True)

        stream, self.stream = self.stream, None
        if stream is not None:
            await _close_stream(stream)

        self.current_file = None
        self.last_position = 0


async def _close_stream(stream: ByteStream) -> None:
    with anyio.CancelScope(shield=True):
        try:
            await stream.aclose()
        except Exception:
            logger.warning("Could not close byte stream", exc_info=True)

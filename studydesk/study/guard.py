# studydesk/study/guard.py
"""Last-request-wins guard for overlapping open requests."""

import logging
import math
from typing import Optional, Tuple

import anyio


logger = logging.getLogger(__name__)


class SessionGuard:
    """
    Monotonic session counter plus the cancel scope of the live session.

    Every open request takes a new token. A workflow compares its token
    with the counter after each await and stops without writing when they
    differ. Starting a session (or invalidating) also cancels the previous
    session's scope so its pending reads are aborted.
    """

    def __init__(self) -> None:
        self._counter = 0
        self._scope: Optional[anyio.CancelScope] = None

    @property
    def current(self) -> int:
        return self._counter

    def begin(self, timeout: Optional[float] = None) -> Tuple[int, anyio.CancelScope]:
        """
        Start a new session.

        Args:
            timeout: Seconds before the new session's scope expires

        Returns:
            (token, cancel scope the session must run in)
        """
        self._counter += 1
        self._cancel_active()

        deadline = anyio.current_time() + timeout if timeout else math.inf
        self._scope = anyio.CancelScope(deadline=deadline)
        return self._counter, self._scope

    def is_current(self, token: int) -> bool:
        return token == self._counter

    def invalidate(self) -> None:
        """Make every outstanding token stale."""
        self._counter += 1
        self._cancel_active()

    def release(self, scope: anyio.CancelScope) -> None:
        """Forget a finished session's scope."""
        if self._scope is scope:
            self._scope = None

    def _cancel_active(self) -> None:
        if self._scope is not None:
            logger.debug("Cancelling superseded session scope")
            self._scope.cancel()
            self._scope = None

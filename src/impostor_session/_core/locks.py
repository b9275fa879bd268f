# Area: Core
"""
impostor_session._core.locks — Per-session mutual exclusion
===========================================================

Serializes status/round/turn mutations of one session inside a process.
Cross-process safety comes from the store's conditional updates; this
lock keeps racing threads from even attempting the same transition.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator

from ..errors import SessionBusyError

logger = logging.getLogger("impostor_session.locks")


class SessionLocks:
    """
    Registry of one ``threading.Lock`` per session id.

    Acquisition is bounded by ``timeout_seconds`` so no call blocks
    indefinitely behind a stuck writer.
    """

    def __init__(self, timeout_seconds: float = 5.0) -> None:
        self.timeout_seconds = timeout_seconds
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, session_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = self._locks[session_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, session_id: str) -> Iterator[None]:
        """
        Hold the session's lock for the duration of the block.

        Raises:
            SessionBusyError: If the lock is not acquired within the timeout
        """
        lock = self._lock_for(session_id)
        if not lock.acquire(timeout=self.timeout_seconds):
            logger.warning("[%s] Lock wait exceeded %.1fs", session_id, self.timeout_seconds)
            raise SessionBusyError(session_id, self.timeout_seconds)
        try:
            yield
        finally:
            lock.release()

    def forget(self, session_id: str) -> None:
        """Drop the lock of a finished session."""
        with self._registry_lock:
            self._locks.pop(session_id, None)

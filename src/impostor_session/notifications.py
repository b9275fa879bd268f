"""
impostor_session.notifications — Change notification
=====================================================

The orchestrator announces committed changes as logical events. Delivery
is at-least-once and carries no state: subscribers re-fetch the session
snapshot. ``ChangeFeed`` fans events out in-process; ``SessionWatcher``
is the polling fallback that watches a session's version.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Protocol

from ._core.enums import ChangeEvent

logger = logging.getLogger("impostor_session.notifications")

Subscriber = Callable[[ChangeEvent, str], None]


class ChangeNotifier(Protocol):
    """Protocol for the notification collaborator of the orchestrator."""

    def notify(self, event: ChangeEvent, session_id: str) -> None:
        """Called after commit; must not raise into the caller."""
        ...


class NullNotifier:
    """Notifier that drops every event."""

    def notify(self, event: ChangeEvent, session_id: str) -> None:
        return None


class ChangeFeed:
    """
    In-process fan-out of change events.

    Subscribers register per session id, or for every session with
    ``session_id=None``. A failing subscriber is logged and skipped.

    Usage:
        feed = ChangeFeed()
        feed.subscribe(lambda event, sid: refresh(sid), session_id=sid)
        orchestrator = SessionOrchestrator(store, packs, notifier=feed)
    """

    def __init__(self):
        self._subscribers: Dict[Optional[str], List[Subscriber]] = {}
        self._lock = threading.Lock()

    def subscribe(self, callback: Subscriber, session_id: Optional[str] = None) -> Callable[[], None]:
        """
        Register a callback.

        Returns:
            A function that removes the subscription
        """
        with self._lock:
            self._subscribers.setdefault(session_id, []).append(callback)

        def unsubscribe() -> None:
            with self._lock:
                callbacks = self._subscribers.get(session_id, [])
                if callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe

    def notify(self, event: ChangeEvent, session_id: str) -> None:
        with self._lock:
            callbacks = list(self._subscribers.get(session_id, []))
            callbacks += self._subscribers.get(None, [])
        for callback in callbacks:
            try:
                callback(event, session_id)
            except Exception:
                logger.exception("Subscriber failed on %s for %s", event.value, session_id)


class SessionWatcher:
    """
    Polls a session snapshot and reports when its version changes.

    Args:
        fetch: Returns the current snapshot dict (e.g. a bound
            ``orchestrator.snapshot`` call)
        on_change: Called with each new snapshot
        poll_interval: Seconds between polls
    """

    def __init__(
        self,
        fetch: Callable[[], Dict[str, Any]],
        on_change: Callable[[Dict[str, Any]], None],
        poll_interval: float = 1.0,
    ):
        self.fetch = fetch
        self.on_change = on_change
        self.poll_interval = poll_interval
        self.last_version: Optional[int] = None
        self.last_status: Optional[str] = None
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def poll_once(self) -> bool:
        """Single poll iteration. Returns True if a change was reported."""
        snapshot = self.fetch()
        version = snapshot.get("version")
        if version == self.last_version:
            return False
        self.last_version = version
        self.last_status = snapshot.get("status")
        self.on_change(snapshot)
        return True

    def run(self) -> None:
        """Poll until stopped or the session finishes. Blocks."""
        while not self._stop.is_set():
            try:
                self.poll_once()
                if self.last_status == "finished":
                    break
            except Exception as e:
                logger.error(f"Watcher poll error: {e}", exc_info=True)
            self._stop.wait(self.poll_interval)
        logger.debug("Watcher stopped.")

    def start(self) -> None:
        """Run in a daemon thread."""
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="session-watcher", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None


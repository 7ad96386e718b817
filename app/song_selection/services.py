"""
Song selection services: session registry and cookie-based session lookup.
"""
import logging
import time
import uuid
from collections import OrderedDict
from threading import Lock
from typing import Callable, List, Optional

from flask import request

from shuffle_service.selection import SelectionOrchestrator

logger = logging.getLogger(__name__)


class _SessionEntry:
    __slots__ = ("orchestrator", "last_used")

    def __init__(self, orchestrator: SelectionOrchestrator, last_used: float):
        self.orchestrator = orchestrator
        self.last_used = last_used


class SessionRegistry:
    """Maps session ids to their orchestrators, creating them on first use.

    Entries are kept in least-recently-used order. Sessions idle for longer
    than ``idle_timeout`` seconds are evicted whenever a new session is
    created, and the oldest session is evicted once ``max_sessions`` is
    reached. Eviction listeners are called with the evicted session id.

    Each orchestrator carries its own lock; this registry's lock only guards
    the mapping itself.
    """

    def __init__(
        self,
        orchestrator_factory: Callable[[], SelectionOrchestrator],
        idle_timeout: float = 2 * 3600,
        max_sessions: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._orchestrator_factory = orchestrator_factory
        self._sessions: "OrderedDict[str, _SessionEntry]" = OrderedDict()
        self._lock = Lock()
        self._clock = clock
        self._eviction_listeners: List[Callable[[str], None]] = []
        self.idle_timeout = idle_timeout
        self.max_sessions = max_sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def add_eviction_listener(self, listener: Callable[[str], None]) -> None:
        self._eviction_listeners.append(listener)

    def get(self, session_id: str, create: bool = True) -> Optional[SelectionOrchestrator]:
        """Return the session's orchestrator and mark it as used.

        With ``create=False`` an unknown session returns None instead of
        being created.
        """
        evicted = []
        with self._lock:
            now = self._clock()
            entry = self._sessions.get(session_id)
            if entry is not None:
                entry.last_used = now
                self._sessions.move_to_end(session_id)
                return entry.orchestrator
            if not create:
                return None

            evicted.extend(self._evict_idle(now))
            while len(self._sessions) >= self.max_sessions:
                oldest_id, _ = self._sessions.popitem(last=False)
                evicted.append(oldest_id)

            orchestrator = self._orchestrator_factory()
            self._sessions[session_id] = _SessionEntry(orchestrator, now)
            logger.info(f"Created listening session {session_id}")

        self._notify_evicted(evicted)
        return orchestrator

    def peek(self, session_id: str) -> Optional[SelectionOrchestrator]:
        """Return the orchestrator without creating it or marking it used."""
        with self._lock:
            entry = self._sessions.get(session_id)
            return entry.orchestrator if entry else None

    def drop(self, session_id: str) -> bool:
        with self._lock:
            dropped = self._sessions.pop(session_id, None) is not None
        if dropped:
            self._notify_evicted([session_id])
        return dropped

    def cleanup_idle(self) -> int:
        """Remove sessions idle longer than the timeout. Returns how many."""
        with self._lock:
            evicted = self._evict_idle(self._clock())
        self._notify_evicted(evicted)
        return len(evicted)

    def _evict_idle(self, now: float) -> List[str]:
        # Caller holds the lock; entries are ordered oldest first
        cutoff = now - self.idle_timeout
        evicted = []
        while self._sessions:
            session_id, entry = next(iter(self._sessions.items()))
            if entry.last_used >= cutoff:
                break
            del self._sessions[session_id]
            evicted.append(session_id)
        return evicted

    def _notify_evicted(self, session_ids: List[str]) -> None:
        if not session_ids:
            return
        logger.info(f"Evicted {len(session_ids)} listening sessions")
        for session_id in session_ids:
            for listener in self._eviction_listeners:
                listener(session_id)


class SongSelectionService:
    """Resolves the caller's session from its cookie."""

    COOKIE_NAME = "sid"
    COOKIE_MAX_AGE = 60 * 60 * 24  # one day

    def __init__(self, registry: SessionRegistry):
        self.registry = registry

    def get_session_id(self) -> Optional[str]:
        """Get the current session ID from cookies."""
        return request.cookies.get(self.COOKIE_NAME)

    @staticmethod
    def new_session_id() -> str:
        return uuid.uuid4().hex

    def resolve_session(self) -> tuple[str, bool]:
        """Return (session_id, is_new). A new id must be set as a cookie."""
        session_id = self.get_session_id()
        if session_id:
            return session_id, False
        return self.new_session_id(), True

    def orchestrator_for(self, session_id: str, create: bool = True) -> Optional[SelectionOrchestrator]:
        """Look up the session; read-only callers pass create=False."""
        return self.registry.get(session_id, create=create)

    def attach_cookie(self, response, session_id: str):
        response.set_cookie(
            self.COOKIE_NAME,
            session_id,
            max_age=self.COOKIE_MAX_AGE,
            httponly=True,
            samesite="Lax",
        )
        return response

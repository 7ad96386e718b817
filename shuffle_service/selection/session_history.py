"""
Session history and back/forward navigation.

The history is append-only: a song is appended only when a fresh store query
selected it, never on navigation. The cursor points at the song on display
(-1 before anything has been shown). ``pool_size`` is the best known count
of songs matching the current target, seen plus unseen.

Not thread-safe on its own; the orchestrator serializes access.
"""

import logging
from typing import FrozenSet, List, Optional, Tuple

from ..models import SessionState, Song

logger = logging.getLogger(__name__)


class SessionHistory:
    """Ordered record of songs shown this session plus a navigation cursor."""

    def __init__(self):
        self._songs: List[Song] = []
        self._cursor = -1
        self._pool_size = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def pool_size(self) -> int:
        return self._pool_size

    @property
    def seen_count(self) -> int:
        return len(self._songs)

    @property
    def songs(self) -> Tuple[Song, ...]:
        return tuple(self._songs)

    @property
    def current(self) -> Optional[Song]:
        return self._songs[self._cursor] if self._cursor >= 0 else None

    @property
    def seen_ids(self) -> FrozenSet[str]:
        return frozenset(song.id for song in self._songs)

    @property
    def at_end(self) -> bool:
        return self._cursor >= len(self._songs) - 1

    @property
    def can_go_back(self) -> bool:
        return self._cursor > 0

    @property
    def can_go_forward(self) -> bool:
        # The last clause means unseen matches may still be worth fetching
        return (
            self._cursor < len(self._songs) - 1
            or self._cursor == -1
            or self._pool_size > len(self._songs)
        )

    def find(self, song_id: str) -> Optional[Song]:
        for song in self._songs:
            if song.id == song_id:
                return song
        return None

    def record_new_selection(self, song: Song, unseen_count: int) -> None:
        """Append a freshly selected song and recompute the pool size.

        Args:
            song: The song picked from the latest store query
            unseen_count: How many songs that query returned (the pick included)
        """
        seen_before = len(self._songs)
        self._songs.append(song)
        self._cursor = len(self._songs) - 1
        self._pool_size = max(unseen_count + seen_before, len(self._songs))

    def record_no_unseen(self) -> None:
        """A fresh query found nothing new: only seen songs remain in the pool."""
        self._pool_size = len(self._songs)

    def step_back(self) -> bool:
        """Move the cursor back one song. Returns False (no-op) at the start."""
        if self._cursor <= 0:
            return False
        self._cursor -= 1
        return True

    def step_forward(self) -> bool:
        """Move the cursor forward through already shown songs.

        Returns False when the cursor is at the end (or nothing is shown yet);
        the caller should make a new selection instead.
        """
        if self.at_end:
            return False
        self._cursor += 1
        return True

    def reset(self) -> None:
        self._songs = []
        self._cursor = -1
        self._pool_size = 0

    def snapshot(self) -> SessionState:
        return SessionState(
            current=self.current,
            pool_size=self._pool_size,
            seen_count=len(self._songs),
            can_go_back=self.can_go_back,
            can_go_forward=self.can_go_forward,
            cursor=self._cursor,
        )

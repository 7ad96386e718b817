"""
Playlist services: songs a listener saved during the session.

Playlists live in memory only and survive session resets, matching the
board's "add to playlist" button which keeps saved songs across skips.
"""
import logging
from threading import Lock
from typing import Dict

from shuffle_service.models import SessionPlaylist

from app.song_selection.services import SessionRegistry

logger = logging.getLogger(__name__)


class SongNotInHistoryError(LookupError):
    """Only songs that were shown in this session can be saved."""


class PlaylistService:
    """Per-session playlists keyed by the same session id as the history."""

    def __init__(self, registry: SessionRegistry):
        self.registry = registry
        self._playlists: Dict[str, SessionPlaylist] = {}
        self._lock = Lock()
        registry.add_eviction_listener(self.drop_session)

    def __len__(self) -> int:
        with self._lock:
            return len(self._playlists)

    def get_playlist(self, session_id: str) -> SessionPlaylist:
        """Return the session's playlist, or an unstored empty one."""
        with self._lock:
            playlist = self._playlists.get(session_id)
            return playlist if playlist is not None else SessionPlaylist()

    def drop_session(self, session_id: str) -> None:
        """Forget the playlist of a session that left the registry."""
        with self._lock:
            self._playlists.pop(session_id, None)

    def add_song(self, session_id: str, song_id: str) -> bool:
        """Save a song shown in this session.

        Returns:
            True if added, False if it was already in the playlist

        Raises:
            SongNotInHistoryError: The song was never shown in this session
        """
        orchestrator = self.registry.get(session_id, create=False)
        song = orchestrator.find_in_history(song_id) if orchestrator else None
        if song is None:
            raise SongNotInHistoryError(song_id)

        with self._lock:
            # Evicted between the lookup and here: do not leave an orphan
            if session_id not in self.registry:
                raise SongNotInHistoryError(song_id)
            playlist = self._playlists.setdefault(session_id, SessionPlaylist())
            added = playlist.add(song)
        if added:
            logger.info(f"Session {session_id} saved song {song_id}")
        return added

    def is_in_playlist(self, session_id: str, song_id: str) -> bool:
        with self._lock:
            playlist = self._playlists.get(session_id)
            return playlist is not None and playlist.contains(song_id)

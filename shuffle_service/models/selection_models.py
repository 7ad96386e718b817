"""
Selection outcome models.

Plain dataclasses returned by the scheduler, the orchestrator and the
session navigation operations.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .song_models import Song

ToleranceMap = Dict[str, int]


class SelectionStatus(Enum):
    """Terminal state of one selection attempt."""
    SELECTED = "selected"
    EXHAUSTED = "exhausted"      # every match for the target was already shown
    NO_MATCH = "no_match"        # nothing matches even at maximum tolerance
    SUPERSEDED = "superseded"    # a newer request on the session won the race


@dataclass
class ScoredSong:
    """A candidate paired with its fit score (lower is better)."""
    song: Song
    fit_score: float


@dataclass
class ToleranceOutcome:
    """Result of running the widening loop once."""
    songs: List[Song]
    tolerances: ToleranceMap
    tolerance_used: int
    attempts: int

    @property
    def found(self) -> bool:
        return bool(self.songs)


@dataclass
class SelectionResult:
    """Result of a selection attempt."""
    status: SelectionStatus
    song: Optional[Song] = None
    fit_score: Optional[float] = None
    tolerance_used: int = 0
    pool_size: int = 0  # unseen matches returned by the winning query
    attempts: int = 0

    @property
    def selected(self) -> bool:
        return self.status == SelectionStatus.SELECTED

    @classmethod
    def selected_song(
        cls,
        scored: ScoredSong,
        tolerance_used: int,
        pool_size: int,
        attempts: int,
    ) -> "SelectionResult":
        return cls(
            status=SelectionStatus.SELECTED,
            song=scored.song,
            fit_score=scored.fit_score,
            tolerance_used=tolerance_used,
            pool_size=pool_size,
            attempts=attempts,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "status": self.status.value,
            "song": self.song.to_dict() if self.song else None,
            "fit_score": self.fit_score,
            "tolerance_used": self.tolerance_used,
            "pool_size": self.pool_size,
            "attempts": self.attempts,
        }


@dataclass
class SessionState:
    """Snapshot of a session for display."""
    current: Optional[Song]
    pool_size: int
    seen_count: int
    can_go_back: bool
    can_go_forward: bool
    cursor: int = -1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current.to_dict() if self.current else None,
            "pool_size": self.pool_size,
            "seen_count": self.seen_count,
            "can_go_back": self.can_go_back,
            "can_go_forward": self.can_go_forward,
            "cursor": self.cursor,
        }


@dataclass
class NavigationResult:
    """Outcome of a back/forward request.

    ``selection`` is set only when stepping forward ran past the end of the
    history and a fresh selection was made instead.
    """
    moved: bool
    song: Optional[Song] = None
    selection: Optional[SelectionResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "moved": self.moved,
            "song": self.song.to_dict() if self.song else None,
            "selection": self.selection.to_dict() if self.selection else None,
        }


@dataclass
class SessionPlaylist:
    """Songs the listener saved during the session, in insertion order."""
    songs: List[Song] = field(default_factory=list)

    def contains(self, song_id: str) -> bool:
        return any(s.id == song_id for s in self.songs)

    def add(self, song: Song) -> bool:
        """Append the song. Returns False when it is already saved."""
        if self.contains(song.id):
            return False
        self.songs.append(song)
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": len(self.songs),
            "songs": [s.to_dict() for s in self.songs],
        }

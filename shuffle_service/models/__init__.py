"""
Models package for songs, dial targets and selection outcomes.
"""

from .song_models import (
    DIAL_KEYS,
    DIAL_MIN,
    DIAL_MAX,
    DEFAULT_DIAL_VALUES,
    DialValues,
    Song,
)

from .selection_models import (
    NavigationResult,
    ScoredSong,
    SelectionResult,
    SelectionStatus,
    SessionPlaylist,
    SessionState,
    ToleranceMap,
    ToleranceOutcome,
)

__all__ = [
    # Song models
    "DIAL_KEYS",
    "DIAL_MIN",
    "DIAL_MAX",
    "DEFAULT_DIAL_VALUES",
    "DialValues",
    "Song",

    # Selection models
    "NavigationResult",
    "ScoredSong",
    "SelectionResult",
    "SelectionStatus",
    "SessionPlaylist",
    "SessionState",
    "ToleranceMap",
    "ToleranceOutcome",
]

"""
Song selection subsystem: per-session selection and navigation over HTTP.
"""

from .models import DialRequest, OUTCOME_HINTS
from .services import SessionRegistry, SongSelectionService
from .factory import build_store, create_song_selection_module

__all__ = [
    "DialRequest",
    "OUTCOME_HINTS",
    "SessionRegistry",
    "SongSelectionService",
    "build_store",
    "create_song_selection_module",
]

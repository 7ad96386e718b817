"""
Fit scoring between a song and the listener's dial target.

Responsibilities:
- Compute the distance between a song and a target.

Invariant:
Given identical inputs, the score is always the same. Scores are only
comparable within one selection attempt against one target.
"""

from typing import Iterable, List

from ..models import DIAL_KEYS, DialValues, ScoredSong, Song


def calculate_fit_score(song: Song, target: DialValues) -> float:
    """Sum of absolute per-dial differences. 0 is a perfect match."""
    return sum(abs(getattr(song, key) - getattr(target, key)) for key in DIAL_KEYS)


def score_songs(songs: Iterable[Song], target: DialValues) -> List[ScoredSong]:
    """Score every song, best fit first."""
    scored = [ScoredSong(song=song, fit_score=calculate_fit_score(song, target)) for song in songs]
    scored.sort(key=lambda item: item.fit_score)
    return scored

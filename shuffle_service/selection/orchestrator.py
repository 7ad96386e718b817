"""
Selection orchestrator: the "next song" operation for one listening session.

Flow of one selection attempt:
1. Snapshot the ids already shown this session.
2. Run the tolerance widening loop against the store with those ids excluded.
3. If songs came back: score them, draw one, record it in the history.
4. If nothing came back: repeat the final query without exclusions. Songs
   there mean the listener has seen every match (EXHAUSTED); none means
   nothing in the catalog fits the dials (NO_MATCH).

Concurrency: one lock per session guards the history. Store queries run
outside the lock. Every selection, navigation and reset bumps an attempt
counter, and a selection only applies its outcome if no newer request has
started meanwhile; otherwise it reports SUPERSEDED and changes nothing.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Mapping, Optional, Union

from ..models import (
    DialValues,
    NavigationResult,
    SelectionResult,
    SelectionStatus,
    SessionState,
    Song,
)
from .sampler import RandomSource, WeightedSampler
from .scoring import score_songs
from .session_history import SessionHistory
from .store import CandidateStore
from .tolerance import ToleranceScheduler, ToleranceSettings

logger = logging.getLogger(__name__)

TargetLike = Union[DialValues, Mapping[str, Any], None]


def coerce_target(target: TargetLike) -> DialValues:
    """Accept a DialValues or a plain mapping; validate before any query."""
    if isinstance(target, DialValues):
        return target
    return DialValues.from_mapping(target)


class SelectionOrchestrator:
    """Owns one session's history and serves selections and navigation."""

    def __init__(
        self,
        store: CandidateStore,
        settings: Optional[ToleranceSettings] = None,
        rng: Optional[RandomSource] = None,
        history: Optional[SessionHistory] = None,
    ):
        self.scheduler = ToleranceScheduler(store, settings)
        self.sampler = WeightedSampler(rng)
        self.history = history or SessionHistory()
        self._lock = threading.RLock()
        self._attempt = 0

    def _begin_attempt(self) -> int:
        # Caller holds the lock
        self._attempt += 1
        return self._attempt

    def select_next(self, target: TargetLike) -> SelectionResult:
        """Select a song for the target that this session has not seen yet.

        Raises:
            InvalidTargetError: A dial value is outside 0-10 (no query is made)
            StoreUnavailableError: The store failed; the history is untouched
        """
        target = coerce_target(target)

        with self._lock:
            attempt = self._begin_attempt()
            exclude_ids = self.history.seen_ids

        outcome = self.scheduler.run(target, exclude_ids)

        picked = None
        if outcome.found:
            picked = self.sampler.select(score_songs(outcome.songs, target))
            result = SelectionResult.selected_song(
                picked,
                tolerance_used=outcome.tolerance_used,
                pool_size=len(outcome.songs),
                attempts=outcome.attempts,
            )
        else:
            matches = self.scheduler.requery_unfiltered(target, outcome.tolerances)
            result = SelectionResult(
                status=SelectionStatus.EXHAUSTED if matches else SelectionStatus.NO_MATCH,
                tolerance_used=outcome.tolerance_used,
                attempts=outcome.attempts + 1,
            )

        with self._lock:
            if attempt != self._attempt:
                logger.warning(
                    f"Discarding selection attempt {attempt}; attempt {self._attempt} is current"
                )
                return SelectionResult(
                    status=SelectionStatus.SUPERSEDED,
                    tolerance_used=result.tolerance_used,
                    attempts=result.attempts,
                )
            if picked is not None:
                self.history.record_new_selection(picked.song, unseen_count=len(outcome.songs))
            else:
                self.history.record_no_unseen()

        if picked is not None:
            logger.info(
                f"Selected {picked.song.id} fit={picked.fit_score} "
                f"tolerance={result.tolerance_used} pool={result.pool_size} queries={result.attempts}"
            )
        else:
            logger.info(f"Selection ended {result.status.value} after {result.attempts} queries")
        return result

    def navigate_back(self) -> NavigationResult:
        """Step back through shown songs. No store query is made."""
        with self._lock:
            self._begin_attempt()
            moved = self.history.step_back()
            return NavigationResult(moved=moved, song=self.history.current)

    def navigate_forward(self, target: TargetLike) -> NavigationResult:
        """Step forward through shown songs, or select a new one at the end.

        The target is only validated when a new selection is needed.
        """
        with self._lock:
            self._begin_attempt()
            if self.history.step_forward():
                return NavigationResult(moved=True, song=self.history.current)

        selection = self.select_next(target)
        return NavigationResult(
            moved=selection.selected,
            song=selection.song,
            selection=selection,
        )

    def reset_session(self) -> None:
        with self._lock:
            self._begin_attempt()
            self.history.reset()
        logger.info("Session reset")

    def current_state(self) -> SessionState:
        with self._lock:
            return self.history.snapshot()

    def find_in_history(self, song_id: str) -> Optional[Song]:
        with self._lock:
            return self.history.find(song_id)

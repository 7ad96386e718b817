"""
Progressive tolerance widening for dial range queries.

The scheduler starts with a narrow window around every dial and widens one
dial at a time until the store returns at least one song or the maximum
tolerance has been passed.

Widening order: dials set to a non-extreme value widen first, dials pinned
at 0 or 10 widen last. After every full pass over the dials the whole board
is raised to the next tolerance level, except that extreme dials keep their
own tolerance until the level passes ``extreme_exempt_until``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Dict, List, Tuple

from ..models import DIAL_KEYS, DIAL_MAX, DIAL_MIN, DialValues, ToleranceMap, ToleranceOutcome
from .store import CandidateStore, describe_ranges

_LOG = logging.getLogger("shuffle_service.tolerance")


@dataclass
class ToleranceSettings:
    """Tuning constants for the widening loop."""
    base_tolerance: int = 2
    max_tolerance: int = 5
    extreme_exempt_until: int = 3

    def __post_init__(self):
        if self.base_tolerance < 0:
            raise ValueError("base_tolerance must be non-negative")
        if self.max_tolerance < self.base_tolerance:
            raise ValueError("max_tolerance must be >= base_tolerance")


class ToleranceScheduler:
    """Runs the widening loop for one selection attempt against a store."""

    def __init__(self, store: CandidateStore, settings: ToleranceSettings | None = None):
        self.store = store
        self.settings = settings or ToleranceSettings()

    def priority_order(self, target: DialValues) -> List[str]:
        """Non-extreme dials in natural order, then extreme dials."""
        non_extreme = [key for key in DIAL_KEYS if not target.is_extreme(key)]
        extreme = [key for key in DIAL_KEYS if target.is_extreme(key)]
        return non_extreme + extreme

    def initial_tolerances(self) -> ToleranceMap:
        return {key: self.settings.base_tolerance for key in DIAL_KEYS}

    @staticmethod
    def query_ranges(target: DialValues, tolerances: ToleranceMap) -> Dict[str, Tuple[float, float]]:
        """Closed query interval per dial, clamped to the dial range."""
        ranges = {}
        for key in DIAL_KEYS:
            value = getattr(target, key)
            tolerance = tolerances[key]
            ranges[key] = (max(DIAL_MIN, value - tolerance), min(DIAL_MAX, value + tolerance))
        return ranges

    def _query(self, target: DialValues, tolerances: ToleranceMap, exclude_ids: AbstractSet[str]):
        ranges = self.query_ranges(target, tolerances)
        songs = self.store.query(ranges, exclude_ids)
        _LOG.debug(
            "Store query ranges=%s excluded=%d -> %d songs",
            describe_ranges(ranges), len(exclude_ids), len(songs),
        )
        return songs

    def run(self, target: DialValues, exclude_ids: AbstractSet[str]) -> ToleranceOutcome:
        """Query, widening until something is found or tolerance runs out.

        Store errors propagate; widening only continues on an empty success.
        """
        settings = self.settings
        order = self.priority_order(target)
        tolerances = self.initial_tolerances()

        songs = self._query(target, tolerances, exclude_ids)
        attempts = 1

        current_tolerance = settings.base_tolerance
        dial_index = 0

        while not songs and current_tolerance <= settings.max_tolerance:
            dial = order[dial_index]
            tolerances[dial] = max(tolerances[dial], current_tolerance + 1)
            dial_index += 1

            if dial_index >= len(order):
                dial_index = 0
                current_tolerance += 1
                for key in order:
                    if not target.is_extreme(key) or current_tolerance > settings.extreme_exempt_until:
                        tolerances[key] = max(tolerances[key], current_tolerance)
                _LOG.debug("Completed widening pass, tolerance level now %d", current_tolerance)

            songs = self._query(target, tolerances, exclude_ids)
            attempts += 1

        return ToleranceOutcome(
            songs=songs,
            tolerances=dict(tolerances),
            tolerance_used=max(tolerances.values()),
            attempts=attempts,
        )

    def requery_unfiltered(self, target: DialValues, tolerances: ToleranceMap) -> List:
        """Repeat a query with an empty exclusion set."""
        return self._query(target, tolerances, frozenset())

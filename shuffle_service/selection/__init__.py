"""
Song selection package: range queries with progressive tolerance widening,
fit scoring, weighted sampling and per-session history.

Kept free of Flask so it can be reused by the web layer, scripts or tests.
"""

from .orchestrator import SelectionOrchestrator, coerce_target
from .sampler import RandomSource, WeightedSampler, fit_weight
from .scoring import calculate_fit_score, score_songs
from .session_history import SessionHistory
from .store import CandidateStore, InMemoryCandidateStore, PostgrestCandidateStore
from .tolerance import ToleranceScheduler, ToleranceSettings

__all__ = [
    "CandidateStore",
    "InMemoryCandidateStore",
    "PostgrestCandidateStore",
    "RandomSource",
    "SelectionOrchestrator",
    "SessionHistory",
    "ToleranceScheduler",
    "ToleranceSettings",
    "WeightedSampler",
    "calculate_fit_score",
    "coerce_target",
    "fit_weight",
    "score_songs",
]

# Shuffle service package: song selection core shared by the web app and scripts

from .errors import SelectionError, StoreUnavailableError, InvalidTargetError
from .models import (
    DIAL_KEYS,
    DEFAULT_DIAL_VALUES,
    DialValues,
    Song,
    SelectionResult,
    SelectionStatus,
    SessionState,
    NavigationResult,
)
from .selection import (
    CandidateStore,
    InMemoryCandidateStore,
    PostgrestCandidateStore,
    SelectionOrchestrator,
    SessionHistory,
    ToleranceScheduler,
    ToleranceSettings,
    WeightedSampler,
    calculate_fit_score,
)
from .logging_config import (
    setup_logging,
    stop_logging,
    get_logger,
    ThreadSafeLoggingConfig,
)

__all__ = [
    "SelectionError",
    "StoreUnavailableError",
    "InvalidTargetError",
    "DIAL_KEYS",
    "DEFAULT_DIAL_VALUES",
    "DialValues",
    "Song",
    "SelectionResult",
    "SelectionStatus",
    "SessionState",
    "NavigationResult",
    "CandidateStore",
    "InMemoryCandidateStore",
    "PostgrestCandidateStore",
    "SelectionOrchestrator",
    "SessionHistory",
    "ToleranceScheduler",
    "ToleranceSettings",
    "WeightedSampler",
    "calculate_fit_score",
    "setup_logging",
    "stop_logging",
    "get_logger",
    "ThreadSafeLoggingConfig",
]

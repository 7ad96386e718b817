"""
Song selection subsystem models for request parsing and user-facing hints.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from shuffle_service.errors import InvalidTargetError
from shuffle_service.models import DEFAULT_DIAL_VALUES, DialValues, SelectionStatus


# What the listener can do about each non-selected outcome
OUTCOME_HINTS = {
    SelectionStatus.EXHAUSTED: "You've seen all matching songs! Reset the session to hear them again.",
    SelectionStatus.NO_MATCH: "No songs match your dial settings. Try loosening the dials.",
    SelectionStatus.SUPERSEDED: "A newer request replaced this one.",
}


@dataclass
class DialRequest:
    """Parsed body of a selection or forward request."""
    dials: DialValues

    @classmethod
    def from_json(cls, payload: Optional[Dict[str, Any]]) -> "DialRequest":
        """Build from a JSON body; missing dials fall back to the defaults.

        Raises:
            InvalidTargetError: A dial is unknown, non-numeric or out of range
        """
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise InvalidTargetError("Request body must be a JSON object")
        raw = payload.get("dials")
        if raw is None:
            return cls(dials=DEFAULT_DIAL_VALUES)
        return cls(dials=DialValues.from_mapping(raw))

    @staticmethod
    def raw_dials(payload: Any) -> Any:
        """Unvalidated dial mapping from a body, for callers that validate later.

        A body that is not an object is returned as-is so that validation
        rejects it.
        """
        if isinstance(payload, dict):
            return payload.get("dials")
        return payload


def hint_for(status: SelectionStatus) -> Optional[str]:
    return OUTCOME_HINTS.get(status)

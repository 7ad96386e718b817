"""
Error types raised by the selection core.

Exhaustion and "no match" are ordinary outcomes and are reported through
SelectionResult, never raised.
"""

from typing import Any, Optional


class SelectionError(Exception):
    """Base class for selection core failures."""


class StoreUnavailableError(SelectionError):
    """The candidate store could not answer a query.

    Raised by store adapters. A selection attempt that hits this error is
    aborted and leaves the session history untouched.
    """


class InvalidTargetError(SelectionError, ValueError):
    """A target dial is unknown, non-numeric or outside the 0-10 range."""

    def __init__(self, message: str, dial: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.dial = dial
        self.value = value

    def to_dict(self) -> dict:
        return {
            "error": "invalid-target",
            "message": str(self),
            "dial": self.dial,
            "value": self.value,
        }

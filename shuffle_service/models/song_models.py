"""
Song and dial data models.

This module contains the Pydantic models for catalog songs and for the
seven-dial target vector a listener sets on the mixing board.
"""

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import InvalidTargetError

DIAL_KEYS = (
    "production",
    "craft",
    "groove",
    "sonic_roots",
    "mood",
    "intensity",
    "vibe",
)

DIAL_MIN = 0
DIAL_MAX = 10


def _dial_field(default: Any = ...) -> Any:
    return Field(default=default, ge=DIAL_MIN, le=DIAL_MAX, allow_inf_nan=False)


class DialValues(BaseModel):
    """Target preference vector, one value per dial in the range 0-10."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    production: float = _dial_field(5)
    craft: float = _dial_field(5)
    groove: float = _dial_field(5)
    sonic_roots: float = _dial_field(5)
    mood: float = _dial_field(5)
    intensity: float = _dial_field(5)
    vibe: float = _dial_field(5)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "DialValues":
        """Build a target from untrusted input, raising InvalidTargetError."""
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise InvalidTargetError("Dial values must be an object")

        for key, value in data.items():
            if key not in DIAL_KEYS:
                raise InvalidTargetError(f"Unknown dial: {key}", dial=key, value=value)
            # bool is an int subclass; "true" is not a dial setting
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidTargetError(
                    f"Dial '{key}' must be a number", dial=key, value=value
                )

        try:
            return cls(**dict(data))
        except ValidationError as exc:
            first = exc.errors()[0]
            dial = first["loc"][0] if first.get("loc") else None
            value = data.get(dial) if dial else None
            raise InvalidTargetError(
                f"Dial '{dial}' must be between {DIAL_MIN} and {DIAL_MAX}",
                dial=dial,
                value=value,
            ) from exc

    def as_dict(self) -> Dict[str, float]:
        return {key: getattr(self, key) for key in DIAL_KEYS}

    def is_extreme(self, dial: str) -> bool:
        """True when the dial sits exactly on either end of its range."""
        value = getattr(self, dial)
        return value == DIAL_MIN or value == DIAL_MAX


DEFAULT_DIAL_VALUES = DialValues()


class Song(BaseModel):
    """A catalog song. Owned by the store and never mutated by the core."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    title: str
    artist: str
    album: Optional[str] = None
    year: Optional[int] = None
    spotify_uri: Optional[str] = None

    production: float = _dial_field()
    craft: float = _dial_field()
    groove: float = _dial_field()
    sonic_roots: float = _dial_field()
    mood: float = _dial_field()
    intensity: float = _dial_field()
    vibe: float = _dial_field()

    curator_notes: Optional[str] = None
    written_story: Optional[str] = None
    discovery_context: Optional[str] = None
    radio_tag_url: Optional[str] = None
    family_only: bool = False

    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def dial_values(self) -> DialValues:
        return DialValues(**{key: getattr(self, key) for key in DIAL_KEYS})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return self.model_dump()

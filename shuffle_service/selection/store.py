"""
Candidate store interface and adapters.

The core only ever asks one question of the catalog: "which songs have every
dial inside these closed ranges, excluding these ids?". Adapters answer it
from memory or from a remote relational table.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import AbstractSet, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple

import requests
from pydantic import ValidationError

from ..errors import StoreUnavailableError
from ..models import DIAL_KEYS, Song

_LOG = logging.getLogger("shuffle_service.store")

DialRanges = Mapping[str, Tuple[float, float]]


class CandidateStore(Protocol):
    """Read-only range query over the song catalog."""

    def query(self, ranges: DialRanges, exclude_ids: AbstractSet[str]) -> List[Song]:
        """Return every song inside all ranges whose id is not excluded.

        No ordering guarantee. An empty ``exclude_ids`` excludes nothing.
        Failures are raised as StoreUnavailableError.
        """


def _in_ranges(song: Song, ranges: DialRanges) -> bool:
    for dial, (low, high) in ranges.items():
        value = getattr(song, dial)
        if value < low or value > high:
            return False
    return True


class InMemoryCandidateStore:
    """Catalog held in a list, filtered with a linear scan."""

    def __init__(self, songs: Iterable[Song] = ()):
        self._songs: List[Song] = list(songs)

    def __len__(self) -> int:
        return len(self._songs)

    @property
    def songs(self) -> List[Song]:
        return list(self._songs)

    def query(self, ranges: DialRanges, exclude_ids: AbstractSet[str]) -> List[Song]:
        exclude_ids = exclude_ids or frozenset()
        return [
            song for song in self._songs
            if song.id not in exclude_ids and _in_ranges(song, ranges)
        ]

    @classmethod
    def from_json_file(cls, path: Path) -> "InMemoryCandidateStore":
        """Load a catalog file holding a list of songs or ``{"songs": [...]}``."""
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreUnavailableError(f"Cannot read catalog {path}: {exc}") from exc

        rows = data.get("songs", []) if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise StoreUnavailableError(f"Catalog {path} does not contain a song list")

        try:
            songs = [Song(**row) for row in rows]
        except (TypeError, ValidationError) as exc:
            raise StoreUnavailableError(f"Catalog {path} has an invalid song: {exc}") from exc

        _LOG.info("Loaded %d songs from %s", len(songs), path)
        return cls(songs)


def _format_bound(value: float) -> str:
    return f"{value:g}"


class PostgrestCandidateStore:
    """Songs table reached through a PostgREST-style HTTP API.

    Ranges become ``dial=gte.low&dial=lte.high`` filters and the exclusion
    set becomes ``id=not.in.(...)``.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        table: str = "songs",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = f"{base_url.rstrip('/')}/{table}"
        self.timeout = timeout
        self.session = session or requests.Session()
        if api_key:
            self.session.headers.update({
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            })

    def build_params(self, ranges: DialRanges, exclude_ids: AbstractSet[str]) -> List[Tuple[str, str]]:
        params: List[Tuple[str, str]] = [("select", "*")]
        for dial in DIAL_KEYS:
            if dial not in ranges:
                continue
            low, high = ranges[dial]
            params.append((dial, f"gte.{_format_bound(low)}"))
            params.append((dial, f"lte.{_format_bound(high)}"))
        if exclude_ids:
            quoted = ",".join(f'"{song_id}"' for song_id in sorted(exclude_ids))
            params.append(("id", f"not.in.({quoted})"))
        return params

    def query(self, ranges: DialRanges, exclude_ids: AbstractSet[str]) -> List[Song]:
        params = self.build_params(ranges, exclude_ids)
        try:
            resp = self.session.get(self.endpoint, params=params, timeout=self.timeout)
            resp.raise_for_status()
            rows = resp.json()
        except requests.RequestException as exc:
            _LOG.warning("Song store request failed: %s", exc)
            raise StoreUnavailableError(f"Song store request failed: {exc}") from exc
        except ValueError as exc:
            raise StoreUnavailableError("Song store returned invalid JSON") from exc

        if not isinstance(rows, list):
            raise StoreUnavailableError("Song store returned an unexpected payload")

        try:
            return [Song(**row) for row in rows]
        except (TypeError, ValidationError) as exc:
            raise StoreUnavailableError(f"Song store returned an invalid row: {exc}") from exc


def describe_ranges(ranges: DialRanges) -> Dict[str, str]:
    """Compact ``{dial: "low-high"}`` view used in debug logs."""
    return {dial: f"{_format_bound(low)}-{_format_bound(high)}" for dial, (low, high) in ranges.items()}

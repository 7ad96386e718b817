"""
Tests for dial, song and outcome models and for request parsing.
"""
import pytest

from app.song_selection.models import DialRequest, hint_for
from shuffle_service.errors import InvalidTargetError
from shuffle_service.models import (
    DEFAULT_DIAL_VALUES,
    DIAL_KEYS,
    DialValues,
    SelectionResult,
    SelectionStatus,
    SessionPlaylist,
    Song,
)


def _make_song(song_id: str) -> Song:
    return Song(id=song_id, title=f"Song {song_id}", artist="Test Artist", **{key: 5 for key in DIAL_KEYS})


class TestDialValues:
    """Test target validation."""

    def test_defaults_sit_in_the_middle(self):
        assert DEFAULT_DIAL_VALUES.as_dict() == {key: 5 for key in DIAL_KEYS}

    def test_partial_mapping_fills_defaults(self):
        dials = DialValues.from_mapping({"mood": 8, "craft": 1.5})

        assert dials.mood == 8
        assert dials.craft == 1.5
        assert dials.vibe == 5

    def test_none_gives_defaults(self):
        assert DialValues.from_mapping(None) == DEFAULT_DIAL_VALUES

    @pytest.mark.parametrize("value", [-1, 10.5, 11, float("nan"), float("inf")])
    def test_out_of_range_rejected(self, value):
        with pytest.raises(InvalidTargetError) as exc_info:
            DialValues.from_mapping({"groove": value})

        assert exc_info.value.dial == "groove"

    @pytest.mark.parametrize("value", ["7", None, True, [5]])
    def test_non_numeric_rejected(self, value):
        with pytest.raises(InvalidTargetError) as exc_info:
            DialValues.from_mapping({"vibe": value})

        assert exc_info.value.dial == "vibe"

    def test_unknown_dial_rejected(self):
        with pytest.raises(InvalidTargetError) as exc_info:
            DialValues.from_mapping({"tempo": 5})

        assert exc_info.value.dial == "tempo"

    def test_non_mapping_rejected(self):
        with pytest.raises(InvalidTargetError):
            DialValues.from_mapping([1, 2, 3])

    def test_boundaries_are_valid_and_extreme(self):
        dials = DialValues(production=0, mood=10, craft=0.5)

        assert dials.is_extreme("production")
        assert dials.is_extreme("mood")
        assert not dials.is_extreme("craft")
        assert not dials.is_extreme("groove")

    def test_invalid_target_error_payload(self):
        error = InvalidTargetError("Dial 'mood' must be between 0 and 10", dial="mood", value=12)

        assert isinstance(error, ValueError)
        assert error.to_dict() == {
            "error": "invalid-target",
            "message": "Dial 'mood' must be between 0 and 10",
            "dial": "mood",
            "value": 12,
        }


class TestSong:

    def test_extra_columns_are_ignored(self):
        song = Song(
            id="a", title="A", artist="B", unknown_column="x",
            **{key: 3 for key in DIAL_KEYS},
        )
        assert not hasattr(song, "unknown_column")
        assert song.dial_values() == DialValues(**{key: 3 for key in DIAL_KEYS})

    def test_missing_dial_rejected(self):
        with pytest.raises(ValueError):
            Song(id="a", title="A", artist="B")

    def test_to_dict_contains_metadata(self):
        song = _make_song("a")
        data = song.to_dict()

        assert data["id"] == "a"
        assert data["mood"] == 5
        assert data["family_only"] is False


class TestOutcomeModels:

    def test_selection_result_serialization(self):
        result = SelectionResult(status=SelectionStatus.NO_MATCH, tolerance_used=6, attempts=30)

        assert result.selected is False
        assert result.to_dict() == {
            "status": "no_match",
            "song": None,
            "fit_score": None,
            "tolerance_used": 6,
            "pool_size": 0,
            "attempts": 30,
        }

    def test_playlist_deduplicates(self):
        playlist = SessionPlaylist()

        assert playlist.add(_make_song("a")) is True
        assert playlist.add(_make_song("a")) is False
        assert playlist.contains("a")
        assert playlist.to_dict()["count"] == 1


class TestDialRequest:
    """Test parsing of selection request bodies."""

    def test_missing_body_uses_defaults(self):
        assert DialRequest.from_json(None).dials == DEFAULT_DIAL_VALUES

    def test_missing_dials_uses_defaults(self):
        assert DialRequest.from_json({}).dials == DEFAULT_DIAL_VALUES

    def test_dials_parsed(self):
        assert DialRequest.from_json({"dials": {"mood": 2}}).dials.mood == 2

    def test_non_object_body_rejected(self):
        with pytest.raises(InvalidTargetError):
            DialRequest.from_json(["mood", 2])

    def test_raw_dials_defers_validation(self):
        assert DialRequest.raw_dials({"dials": {"mood": 42}}) == {"mood": 42}
        assert DialRequest.raw_dials({}) is None
        assert DialRequest.raw_dials(None) is None
        assert DialRequest.raw_dials(["mood"]) == ["mood"]

    def test_hints(self):
        assert "seen all" in hint_for(SelectionStatus.EXHAUSTED)
        assert "loosening" in hint_for(SelectionStatus.NO_MATCH)
        assert hint_for(SelectionStatus.SELECTED) is None

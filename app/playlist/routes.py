"""
Playlist routes.
"""
from flask import Blueprint, jsonify, make_response, request

from app.song_selection.services import SongSelectionService
from .services import PlaylistService, SongNotInHistoryError


def create_playlist_routes(playlist_service: PlaylistService, selection_service: SongSelectionService) -> Blueprint:
    """Create playlist routes."""
    bp = Blueprint('playlist', __name__)

    @bp.route("/api/playlist", methods=["GET"])
    def get_playlist():
        session_id = selection_service.get_session_id()
        if not session_id:
            return jsonify({"count": 0, "songs": []})
        return jsonify(playlist_service.get_playlist(session_id).to_dict())

    @bp.route("/api/playlist/<song_id>", methods=["GET"])
    def playlist_membership(song_id):
        """Whether a song is saved, used to toggle the "add to playlist" button."""
        session_id = selection_service.get_session_id()
        in_playlist = bool(session_id) and playlist_service.is_in_playlist(session_id, song_id)
        return jsonify({"song_id": song_id, "in_playlist": in_playlist})

    @bp.route("/api/playlist", methods=["POST"])
    def add_to_playlist():
        session_id = selection_service.get_session_id()
        if not session_id:
            return jsonify({"error": "no-session"}), 400

        data = request.get_json(silent=True) or {}
        song_id = data.get("song_id") if isinstance(data, dict) else None
        if not isinstance(song_id, str) or not song_id.strip():
            return jsonify({"error": "song_id required"}), 400

        try:
            added = playlist_service.add_song(session_id, song_id.strip())
        except SongNotInHistoryError:
            return jsonify({"error": "song-not-shown"}), 404

        body = playlist_service.get_playlist(session_id).to_dict()
        body["added"] = added
        return make_response(jsonify(body), 201 if added else 200)

    return bp

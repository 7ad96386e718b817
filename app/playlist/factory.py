"""
Factory for creating the playlist module.
"""
from .routes import create_playlist_routes
from .services import PlaylistService


def create_playlist_module(song_selection_module: dict) -> dict:
    """Create playlist module sharing sessions with the song selection module.

    Args:
        song_selection_module: Module dict returned by create_song_selection_module

    Returns:
        Dictionary containing the service and blueprint
    """
    playlist_service = PlaylistService(song_selection_module["registry"])
    blueprint = create_playlist_routes(playlist_service, song_selection_module["service"])

    return {
        "service": playlist_service,
        "blueprint": blueprint
    }

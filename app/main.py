"""
Flask application for the Dial Shuffle listening service.
"""
import sys
from pathlib import Path
from typing import Optional

# Import configuration management
sys.path.append(str(Path(__file__).parent.parent))
from config_manager import ConfigManager

from flask import Flask, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from shuffle_service.selection import CandidateStore, RandomSource

from app.song_selection.factory import build_store, create_song_selection_module
from app.playlist.factory import create_playlist_module

PROJECT_ROOT = Path(__file__).parent.parent


def create_app(
    config_manager: Optional[ConfigManager] = None,
    store: Optional[CandidateStore] = None,
    rng: Optional[RandomSource] = None,
) -> Flask:
    """Build the Flask app and register the subsystem blueprints.

    Args:
        config_manager: Configuration source (default: shuffle_config.json + env)
        store: Candidate store override; built from the store config when omitted
        rng: Random source override shared by every session (tests)
    """
    config_manager = config_manager or ConfigManager()
    app_config = config_manager.get_app_config()
    selection_config = config_manager.get_selection_config()

    app = Flask(__name__)
    app.config["SECRET_KEY"] = app_config.secret_key
    app.wsgi_app = ProxyFix(
        app.wsgi_app,
        x_proto=1,     # trust 1 hop for X-Forwarded-Proto
        x_host=1,      # trust 1 hop for X-Forwarded-Host
        x_prefix=1)    # trust 1 hop for X-Forwarded-Prefix

    # -------------------------------------------------------------------------
    # Modules
    # -------------------------------------------------------------------------

    if store is None:
        store = build_store(config_manager.get_store_config(), PROJECT_ROOT)

    song_selection_module = create_song_selection_module(
        store=store,
        selection_config=selection_config,
        rng=rng,
        session_config=config_manager.get_session_config(),
    )
    playlist_module = create_playlist_module(song_selection_module)

    app.register_blueprint(song_selection_module["blueprint"])
    app.register_blueprint(playlist_module["blueprint"])

    app.extensions["song_selection"] = song_selection_module
    app.extensions["playlist"] = playlist_module

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    return app

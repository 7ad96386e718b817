"""
Test cases for the configuration management system.
Tests config loading, environment overrides, and typed section access.
"""

import os
import json
from unittest.mock import patch, mock_open

from config_manager import (
    ConfigManager,
    AppConfig,
    SelectionConfig,
    SessionConfig,
    StoreConfig,
    get_app_config,
    get_selection_config,
    get_store_config,
    get_session_config,
)


class TestConfigManager:
    """Test the ConfigManager class functionality."""

    def test_init_with_default_config_file(self):
        """Test ConfigManager initialization with default config file."""
        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            with patch.dict(os.environ, {}, clear=True):
                manager = ConfigManager()

            assert manager._config is not None
            assert "app" in manager._config
            assert "selection" in manager._config
            assert "store" in manager._config
            assert "session" in manager._config

    def test_defaults(self):
        """Test the built-in defaults when no file or env vars exist."""
        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            with patch.dict(os.environ, {}, clear=True):
                manager = ConfigManager()

            selection = manager.get_selection_config()
            assert selection.base_tolerance == 2
            assert selection.max_tolerance == 5
            assert selection.extreme_exempt_until == 3
            assert selection.random_seed is None

            store = manager.get_store_config()
            assert store.backend == "json"
            assert store.catalog_path == "data/songs.json"
            assert store.table == "songs"

            session = manager.get_session_config()
            assert session.idle_timeout_minutes == 120
            assert session.max_sessions == 10000

    def test_load_config_from_file(self):
        """Test loading configuration from existing file merges over defaults."""
        test_config = {
            "app": {
                "host": "localhost",
                "port": 8080,
            },
            "selection": {
                "max_tolerance": 4
            },
            "store": {
                "backend": "postgrest",
                "postgrest_url": "https://db.example.com/rest/v1"
            }
        }

        with patch('builtins.open', mock_open(read_data=json.dumps(test_config))):
            with patch('config_manager.Path') as mock_path:
                mock_path.return_value.exists.return_value = True
                with patch.dict(os.environ, {}, clear=True):
                    manager = ConfigManager()

                    assert manager._config["app"]["host"] == "localhost"
                    assert manager._config["app"]["port"] == 8080
                    # untouched keys keep their defaults
                    assert manager._config["app"]["debug"] is False
                    assert manager._config["selection"]["max_tolerance"] == 4
                    assert manager._config["selection"]["base_tolerance"] == 2
                    assert manager._config["store"]["backend"] == "postgrest"
                    assert manager._config["store"]["table"] == "songs"

    def test_invalid_file_keeps_defaults(self):
        """Test that an unparseable config file falls back to defaults."""
        with patch('builtins.open', mock_open(read_data="{not json")):
            with patch('config_manager.Path') as mock_path:
                mock_path.return_value.exists.return_value = True
                with patch.dict(os.environ, {}, clear=True):
                    manager = ConfigManager()

                    assert manager._config["app"]["port"] == 22590

    def test_override_with_env_variables(self):
        """Test that environment variables override config values."""
        env_vars = {
            "APP_HOST": "127.0.0.1",
            "APP_PORT": "9000",
            "APP_DEBUG": "true",
            "APP_SECRET_KEY": "s3cret",
            "BASE_TOLERANCE": "1",
            "MAX_TOLERANCE": "6",
            "EXTREME_EXEMPT_UNTIL": "4",
            "RANDOM_SEED": "42",
            "STORE_BACKEND": "PostgREST",
            "CATALOG_PATH": "/srv/songs.json",
            "POSTGREST_URL": "https://db.example.com/rest/v1",
            "POSTGREST_API_KEY": "anon-key",
            "STORE_TABLE": "tracks",
            "STORE_TIMEOUT": "2.5",
            "SESSION_IDLE_MINUTES": "30",
            "MAX_SESSIONS": "50",
        }

        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            with patch.dict(os.environ, env_vars, clear=True):
                manager = ConfigManager()

                assert manager._config["app"]["host"] == "127.0.0.1"
                assert manager._config["app"]["port"] == 9000
                assert manager._config["app"]["debug"] is True
                assert manager._config["app"]["secret_key"] == "s3cret"
                assert manager._config["selection"]["base_tolerance"] == 1
                assert manager._config["selection"]["max_tolerance"] == 6
                assert manager._config["selection"]["extreme_exempt_until"] == 4
                assert manager._config["selection"]["random_seed"] == 42
                assert manager._config["store"]["backend"] == "postgrest"
                assert manager._config["store"]["catalog_path"] == "/srv/songs.json"
                assert manager._config["store"]["postgrest_url"] == "https://db.example.com/rest/v1"
                assert manager._config["store"]["postgrest_api_key"] == "anon-key"
                assert manager._config["store"]["table"] == "tracks"
                assert manager._config["store"]["timeout"] == 2.5
                assert manager._config["session"]["idle_timeout_minutes"] == 30
                assert manager._config["session"]["max_sessions"] == 50

    def test_get_app_config(self):
        """Test getting application configuration."""
        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            manager = ConfigManager()
            manager._config = {
                "app": {"host": "localhost", "port": 8080, "debug": True, "secret_key": "k"}
            }

            app_config = manager.get_app_config()

            assert isinstance(app_config, AppConfig)
            assert app_config.host == "localhost"
            assert app_config.port == 8080
            assert app_config.debug is True
            assert app_config.secret_key == "k"

    def test_get_selection_config(self):
        """Test getting selection configuration."""
        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            manager = ConfigManager()
            manager._config = {
                "selection": {
                    "base_tolerance": 1,
                    "max_tolerance": 3,
                    "extreme_exempt_until": 2,
                    "random_seed": 7
                }
            }

            selection_config = manager.get_selection_config()

            assert isinstance(selection_config, SelectionConfig)
            assert selection_config.base_tolerance == 1
            assert selection_config.max_tolerance == 3
            assert selection_config.extreme_exempt_until == 2
            assert selection_config.random_seed == 7

    def test_get_store_config(self):
        """Test getting store configuration."""
        with patch('config_manager.Path') as mock_path:
            mock_path.return_value.exists.return_value = False
            manager = ConfigManager()
            manager._config = {
                "store": {
                    "backend": "json",
                    "catalog_path": "catalog.json",
                    "postgrest_url": "",
                    "postgrest_api_key": "",
                    "table": "songs",
                    "timeout": 5.0
                }
            }

            store_config = manager.get_store_config()

            assert isinstance(store_config, StoreConfig)
            assert store_config.catalog_path == "catalog.json"
            assert store_config.timeout == 5.0

    def test_save_config(self, tmp_path):
        """Test saving configuration to file."""
        config_file = tmp_path / "shuffle_config.json"
        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(config_file))
        manager._config["selection"]["max_tolerance"] = 4

        manager.save_config()

        saved = json.loads(config_file.read_text(encoding="utf-8"))
        assert saved["selection"]["max_tolerance"] == 4
        assert saved["store"]["backend"] == "json"

    def test_reload(self, tmp_path):
        """Test reloading picks up file changes."""
        config_file = tmp_path / "shuffle_config.json"
        config_file.write_text(json.dumps({"app": {"port": 1111}}), encoding="utf-8")
        with patch.dict(os.environ, {}, clear=True):
            manager = ConfigManager(str(config_file))
            assert manager.get_app_config().port == 1111

            config_file.write_text(json.dumps({"app": {"port": 2222}}), encoding="utf-8")
            manager.reload()

            assert manager.get_app_config().port == 2222


class TestGlobalConfigFunctions:
    """Test the module-level accessors."""

    def test_global_accessors_return_typed_sections(self):
        assert isinstance(get_app_config(), AppConfig)
        assert isinstance(get_selection_config(), SelectionConfig)
        assert isinstance(get_store_config(), StoreConfig)
        assert isinstance(get_session_config(), SessionConfig)

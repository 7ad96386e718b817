"""
Configuration management for the Dial Shuffle service.
Handles loading, validating, and providing access to application settings.
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class AppConfig:
    """Application configuration settings."""
    host: str
    port: int
    debug: bool
    secret_key: str


@dataclass
class SelectionConfig:
    """Song selection tuning settings."""
    base_tolerance: int
    max_tolerance: int
    extreme_exempt_until: int
    random_seed: Optional[int]


@dataclass
class SessionConfig:
    """Listening session retention settings."""
    idle_timeout_minutes: int
    max_sessions: int


@dataclass
class StoreConfig:
    """Candidate store settings."""
    backend: str  # "json" or "postgrest"
    catalog_path: str
    postgrest_url: str
    postgrest_api_key: str
    table: str
    timeout: float


class ConfigManager:
    """Manages application configuration loading and access."""

    def __init__(self, config_file: str = "shuffle_config.json"):
        self.config_file = Path(config_file)
        self._config: Optional[Dict[str, Any]] = None
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment variables."""
        self._config = self._get_default_config()

        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    file_config = json.load(f)
                    self._merge_config(file_config)
            except (json.JSONDecodeError, FileNotFoundError):
                # Keep default config if file is invalid or not found
                pass

        self._override_with_env()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "app": {
                "host": "0.0.0.0",
                "port": 22590,
                "debug": False,
                "secret_key": "dev"
            },
            "selection": {
                "base_tolerance": 2,
                "max_tolerance": 5,
                "extreme_exempt_until": 3,
                "random_seed": None
            },
            "store": {
                "backend": "json",
                "catalog_path": "data/songs.json",
                "postgrest_url": "",
                "postgrest_api_key": "",
                "table": "songs",
                "timeout": 10.0
            },
            "session": {
                "idle_timeout_minutes": 120,
                "max_sessions": 10000
            }
        }

    def _merge_config(self, file_config: Dict[str, Any]) -> None:
        """Merge file configuration with current config."""
        for section, values in file_config.items():
            if section in self._config and isinstance(values, dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def _override_with_env(self) -> None:
        """Override configuration with environment variables."""
        # App settings
        if os.getenv("APP_HOST"):
            self._config["app"]["host"] = os.getenv("APP_HOST")

        if os.getenv("APP_PORT"):
            self._config["app"]["port"] = int(os.getenv("APP_PORT"))

        if os.getenv("APP_DEBUG"):
            self._config["app"]["debug"] = os.getenv("APP_DEBUG").lower() == "true"

        if os.getenv("APP_SECRET_KEY"):
            self._config["app"]["secret_key"] = os.getenv("APP_SECRET_KEY")

        # Selection settings
        if os.getenv("BASE_TOLERANCE"):
            self._config["selection"]["base_tolerance"] = int(os.getenv("BASE_TOLERANCE"))

        if os.getenv("MAX_TOLERANCE"):
            self._config["selection"]["max_tolerance"] = int(os.getenv("MAX_TOLERANCE"))

        if os.getenv("EXTREME_EXEMPT_UNTIL"):
            self._config["selection"]["extreme_exempt_until"] = int(os.getenv("EXTREME_EXEMPT_UNTIL"))

        if os.getenv("RANDOM_SEED"):
            self._config["selection"]["random_seed"] = int(os.getenv("RANDOM_SEED"))

        # Store settings
        if os.getenv("STORE_BACKEND"):
            self._config["store"]["backend"] = os.getenv("STORE_BACKEND").lower()

        if os.getenv("CATALOG_PATH"):
            self._config["store"]["catalog_path"] = os.getenv("CATALOG_PATH")

        if os.getenv("POSTGREST_URL"):
            self._config["store"]["postgrest_url"] = os.getenv("POSTGREST_URL")

        if os.getenv("POSTGREST_API_KEY"):
            self._config["store"]["postgrest_api_key"] = os.getenv("POSTGREST_API_KEY")

        if os.getenv("STORE_TABLE"):
            self._config["store"]["table"] = os.getenv("STORE_TABLE")

        if os.getenv("STORE_TIMEOUT"):
            self._config["store"]["timeout"] = float(os.getenv("STORE_TIMEOUT"))

        # Session settings
        if os.getenv("SESSION_IDLE_MINUTES"):
            self._config["session"]["idle_timeout_minutes"] = int(os.getenv("SESSION_IDLE_MINUTES"))

        if os.getenv("MAX_SESSIONS"):
            self._config["session"]["max_sessions"] = int(os.getenv("MAX_SESSIONS"))

    def get_app_config(self) -> AppConfig:
        """Get application configuration."""
        app_config = self._config["app"]
        return AppConfig(
            host=app_config["host"],
            port=app_config["port"],
            debug=app_config["debug"],
            secret_key=app_config["secret_key"]
        )

    def get_selection_config(self) -> SelectionConfig:
        """Get song selection configuration."""
        selection_config = self._config["selection"]
        return SelectionConfig(
            base_tolerance=selection_config["base_tolerance"],
            max_tolerance=selection_config["max_tolerance"],
            extreme_exempt_until=selection_config["extreme_exempt_until"],
            random_seed=selection_config["random_seed"]
        )

    def get_store_config(self) -> StoreConfig:
        """Get candidate store configuration."""
        store_config = self._config["store"]
        return StoreConfig(
            backend=store_config["backend"],
            catalog_path=store_config["catalog_path"],
            postgrest_url=store_config["postgrest_url"],
            postgrest_api_key=store_config["postgrest_api_key"],
            table=store_config["table"],
            timeout=store_config["timeout"]
        )

    def get_session_config(self) -> SessionConfig:
        """Get listening session configuration."""
        session_config = self._config["session"]
        return SessionConfig(
            idle_timeout_minutes=session_config["idle_timeout_minutes"],
            max_sessions=session_config["max_sessions"]
        )

    def get_config(self) -> Dict[str, Any]:
        """Get raw configuration dictionary."""
        return self._config.copy()

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def save_config(self) -> None:
        """Save current configuration to file."""
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)


# Global configuration instance
config_manager = ConfigManager()


def get_app_config() -> AppConfig:
    """Get application configuration."""
    return config_manager.get_app_config()


def get_selection_config() -> SelectionConfig:
    """Get song selection configuration."""
    return config_manager.get_selection_config()


def get_store_config() -> StoreConfig:
    """Get candidate store configuration."""
    return config_manager.get_store_config()


def get_session_config() -> SessionConfig:
    """Get listening session configuration."""
    return config_manager.get_session_config()


def reload_config() -> None:
    """Reload configuration."""
    config_manager.reload()


def save_config() -> None:
    """Save configuration to file."""
    config_manager.save_config()

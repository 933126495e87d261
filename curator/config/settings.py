"""Configuration management using Pydantic Settings.

Settings are loaded from environment variables (and a local ``.env`` file during
development) and grouped by concern:

- DatabaseConfig: cache store connection settings
- LoggingConfig: console/file levels and log file location
- APIConfig: remote service limits, page sizes and retry behaviour
"""

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseModel):
    """Cache store connection configuration."""

    url: str = "sqlite+aiosqlite:///data/db/curator.db"
    echo: bool = False
    busy_timeout_ms: int = 30000


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path = Path("curator.log")
    real_time_debug: bool = True


class APIConfig(BaseModel):
    """Remote music service limits and retry configuration."""

    spotify_base_url: str = "https://api.spotify.com/v1/"
    # Items per page when walking paginated collections (Spotify max is 50)
    spotify_page_size: int = 50
    # Hard cap on URIs per playlist mutation request
    spotify_max_tracks_per_request: int = 100
    spotify_top_tracks_limit: int = 50
    spotify_retry_count: int = 3
    spotify_retry_max_delay: float = 30.0
    spotify_request_timeout: int = 10


_FLAT_DATABASE_KEYS = ("database_url", "database_echo", "database_busy_timeout_ms")
_FLAT_LOGGING_KEYS = (
    "console_log_level",
    "file_log_level",
    "log_file",
    "log_real_time_debug",
)


class Settings(BaseSettings):
    """Main application settings with environment variable support.

    Environment variables can be set using flat naming or nested naming:
    - Flat: DATABASE_URL, CONSOLE_LOG_LEVEL, LOG_FILE
    - Nested: DATABASE__URL, LOGGING__CONSOLE_LEVEL, API__SPOTIFY_PAGE_SIZE
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    api: APIConfig = APIConfig()

    @model_validator(mode="before")
    @classmethod
    def transform_flat_env_vars(cls, data: Any) -> Any:
        """Map legacy flat environment variables onto the nested structure."""
        if not isinstance(data, dict):
            return data

        transformed: dict[str, dict[str, Any]] = {}

        # Flat names are not declared fields, so pydantic-settings never reads
        # them from the process environment on its own
        for env_key in (*_FLAT_DATABASE_KEYS, *_FLAT_LOGGING_KEYS):
            if env_key not in data and env_key.upper() in os.environ:
                data[env_key] = os.environ[env_key.upper()]

        db_mapping = {
            "database_url": "url",
            "database_echo": "echo",
            "database_busy_timeout_ms": "busy_timeout_ms",
        }
        for env_key, field_key in db_mapping.items():
            if env_key in data:
                transformed.setdefault("database", {})[field_key] = data.pop(env_key)

        log_mapping = {
            "console_log_level": "console_level",
            "file_log_level": "file_level",
            "log_file": "log_file",
            "log_real_time_debug": "real_time_debug",
        }
        for env_key, field_key in log_mapping.items():
            if env_key in data:
                transformed.setdefault("logging", {})[field_key] = data.pop(env_key)

        for section, values in transformed.items():
            existing = data.get(section)
            if isinstance(existing, dict):
                values = {**existing, **values}
            data[section] = values

        return data


# Singleton instance for application use
settings = Settings()


_LEGACY_KEY_MAP = {
    "DATABASE_URL": lambda: settings.database.url,
    "DATABASE_ECHO": lambda: settings.database.echo,
    "DATABASE_BUSY_TIMEOUT_MS": lambda: settings.database.busy_timeout_ms,
    "CONSOLE_LOG_LEVEL": lambda: settings.logging.console_level,
    "FILE_LOG_LEVEL": lambda: settings.logging.file_level,
    "LOG_FILE": lambda: settings.logging.log_file,
    "SPOTIFY_API_PAGE_SIZE": lambda: settings.api.spotify_page_size,
    "SPOTIFY_MAX_TRACKS_PER_REQUEST": lambda: settings.api.spotify_max_tracks_per_request,
    "SPOTIFY_TOP_TRACKS_LIMIT": lambda: settings.api.spotify_top_tracks_limit,
    "SPOTIFY_API_RETRY_COUNT": lambda: settings.api.spotify_retry_count,
    "SPOTIFY_API_REQUEST_TIMEOUT": lambda: settings.api.spotify_request_timeout,
}


def get_config(key: str, default=None):
    """Get configuration value by flat key with optional default.

    Example:
        >>> page_size = get_config("SPOTIFY_API_PAGE_SIZE", 50)
    """
    if key in _LEGACY_KEY_MAP:
        return _LEGACY_KEY_MAP[key]()
    return default

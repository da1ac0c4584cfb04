# chess_tracker/config/settings.py
"""
Configuration settings for the Chess Tracker application, powered by Pydantic.

This module centralizes the tunable parameters of the surrounding
application: where records are stored and how logging is set up. The insight
thresholds are fixed constants of the insight generator and are not configured
here.
"""
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RecordStoreSettings(BaseModel):
    """Configuration for the key-value record store."""
    db_filepath: str = Field("data/chess_tracker.db", description="The file path for the SQLite record database.")
    storage_key: str = Field("chess-games", description="The key under which the game collection blob is stored.")
    timeout_s: float = Field(10.0, description="Seconds to wait for a locked database before giving up.")

    @field_validator("storage_key")
    @classmethod
    def validate_storage_key(cls, value: str) -> str:
        """Ensures the blob key is not blank."""
        if not value.strip():
            raise ValueError("Configuration error: storage_key must not be blank.")
        return value


class Settings(BaseSettings):
    """
    Main configuration class for the application.

    It loads settings from environment variables with the prefix 'CHESS_TRACKER_'.
    Nested models can be configured using a double underscore delimiter, e.g.,
    `CHESS_TRACKER_STORE__DB_FILEPATH=/tmp/games.db`.
    """
    model_config = SettingsConfigDict(env_prefix='CHESS_TRACKER_', env_nested_delimiter='__')

    store: RecordStoreSettings = Field(default_factory=RecordStoreSettings)
    default_log_level: str = "INFO"
    log_file: Optional[str] = None
    json_logs: bool = False

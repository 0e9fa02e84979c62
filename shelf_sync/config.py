"""
Configuration management for Shelf Sync.
Values come from environment variables (optionally via a .env file).
"""

import os
from typing import Optional, Mapping
from pydantic import BaseModel, Field, ValidationError
from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


REQUIRED_VARIABLES = {
    "notion_key": "NOTION_KEY",
    "notion_database_id": "NOTION_DATABASE_ID",
    "goodreads_id": "GOODREADS_ID",
}


class SyncConfig(BaseModel):
    """Configuration for the sync job."""

    # Notion settings
    notion_key: str = Field(min_length=1, description="Notion integration token")
    notion_database_id: str = Field(min_length=1, description="Target Notion database id")

    # Goodreads settings
    goodreads_id: str = Field(min_length=1, description="Goodreads user id")
    goodreads_rss_key: Optional[str] = Field(
        default=None,
        description="Key for private Goodreads RSS feeds"
    )

    # Sync settings
    batch_size: int = Field(default=25, ge=1, description="Concurrent writes per batch")
    http_timeout_seconds: int = Field(default=30, ge=1, description="Timeout for each HTTP call")
    sync_interval_minutes: int = Field(
        default=0,
        ge=0,
        description="Minutes between runs; 0 runs once and exits"
    )

    log_level: str = Field(default="INFO", description="Logging level")


def get_config_from_env(environ: Optional[Mapping[str, str]] = None) -> SyncConfig:
    """
    Load configuration from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (a .env file is
            only loaded when reading the real environment)

    Raises:
        ConfigError: If a required value is missing or a value is invalid
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    missing = [name for name in REQUIRED_VARIABLES.values() if not (environ.get(name) or "").strip()]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    try:
        return SyncConfig(
            notion_key=environ["NOTION_KEY"].strip(),
            notion_database_id=environ["NOTION_DATABASE_ID"].strip(),
            goodreads_id=environ["GOODREADS_ID"].strip(),
            goodreads_rss_key=(environ.get("GOODREADS_RSS_KEY") or "").strip() or None,
            batch_size=environ.get("OPERATION_BATCH_SIZE") or "25",
            http_timeout_seconds=environ.get("HTTP_TIMEOUT_SECONDS") or "30",
            sync_interval_minutes=environ.get("SYNC_INTERVAL_MINUTES") or "0",
            log_level=environ.get("LOG_LEVEL") or "INFO",
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

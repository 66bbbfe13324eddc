import logging
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Fetch Configuration
    url_template: str = Field(
        "http://wmh-wtc.com/?round={round}",
        description="Results page URL, formatted with the round number.",
    )
    rounds: int = Field(6, ge=1, description="Number of tournament rounds to fetch.")
    request_timeout: float = Field(
        30.0, gt=0, description="HTTP timeout in seconds for a single page."
    )
    user_agent: str = Field(
        "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0",
        description="User-Agent header sent with every page request.",
    )

    # Pipeline Configuration
    queue_size: int = Field(
        1, ge=1, description="Capacity of the queue between two pipeline stages."
    )

    # Storage Configuration
    storage_backend: Literal["sqlite", "supabase", "none"] = Field(
        "sqlite", description="Where normalized records are written."
    )
    database_path: str = Field("data.sqlite", description="SQLite database file.")
    supabase_url: Optional[str] = Field(None, description="URL for the Supabase project.")
    supabase_key: Optional[str] = Field(
        None, description="Key for the Supabase project (never logged)."
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )
    silent: bool = Field(False, description="Suppress all log output.")

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()

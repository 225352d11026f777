"""Runtime settings via Pydantic BaseSettings."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings

from expo_screenshotter.constants import DEFAULT_CONFIG_FILENAME, DEFAULT_NAVIGATION_TIMEOUT_MS


class Settings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "SCREENSHOTTER_",
    }

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Browser
    headless: bool = True
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS

    # Files
    config_filename: str = DEFAULT_CONFIG_FILENAME
    assets_dir: str | None = None  # root holding iphones/ and android/ bezel folders


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()

"""Application settings, read from the environment (prefix ``EVENTCAL_``) or a
local ``.env`` file."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_title: str = "Event Calendar Service"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Load Work / Personal / Health / Social on startup
    seed_categories: bool = True

    model_config = SettingsConfigDict(
        env_prefix="EVENTCAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()

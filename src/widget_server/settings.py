"""Widget service configuration."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from weather_widget.settings import ENV_FILE


class ServerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WEATHER_WIDGET_SERVER_", env_file=str(ENV_FILE), extra="ignore")

    host: str = "0.0.0.0"
    port: int = 7010


@lru_cache(maxsize=1)
def get_settings() -> ServerSettings:
    return ServerSettings()

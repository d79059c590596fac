"""Widget host configuration."""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, get_args

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .logging import get_logger
from .schemas import Theme, Units, WidgetConfig

ENV_FILE = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(ENV_FILE, override=False)

logger = get_logger("settings")


class WidgetSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WEATHER_WIDGET_", env_file=str(ENV_FILE), extra="ignore")

    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("OPENWEATHER_API_KEY", "WEATHER_WIDGET_API_KEY"),
    )
    city: str = "New York"
    units: Units = "metric"
    theme: Theme = "light"

    refresh_interval_s: float = 15 * 60
    # None means no timeout: a hung upstream call keeps the widget loading.
    request_timeout_s: float | None = None
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"

    def default_config(self) -> WidgetConfig:
        return WidgetConfig(api_key=self.api_key, city=self.city, units=self.units, theme=self.theme)


@lru_cache(maxsize=1)
def get_settings() -> WidgetSettings:
    return WidgetSettings()


def resolve_config(
    options: Mapping[str, Any],
    defaults: WidgetConfig | None = None,
    current: WidgetConfig | None = None,
) -> WidgetConfig:
    """Build a config from raw host options, field by field.

    Absent options keep ``current`` (or the default when there is none).
    Blank and unrecognised values take the host default, so a key can be
    cleared again by sending an empty string.
    """
    base = defaults or WidgetConfig()
    keep = current or base

    def pick(name: str, allowed: tuple[str, ...] | None = None) -> str:
        if options.get(name) is None:
            return getattr(keep, name)
        raw = options[name]
        value = raw.strip() if isinstance(raw, str) else ""
        if not value:
            return getattr(base, name)
        if allowed is not None and value not in allowed:
            logger.warning(
                "config_value_ignored",
                extra={"extra": {"option": name, "value": value, "fallback": getattr(base, name)}},
            )
            return getattr(base, name)
        return value

    return WidgetConfig(
        api_key=pick("api_key"),
        city=pick("city"),
        units=pick("units", get_args(Units)),
        theme=pick("theme", get_args(Theme)),
    )

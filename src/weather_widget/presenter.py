"""Display-ready view of a render state."""

from __future__ import annotations

from pydantic import BaseModel

from .schemas import Failed, Loading, Misconfigured, Ready, RenderState, WidgetConfig

SIGN_UP_URL = "https://home.openweathermap.org/users/sign_up"
MISSING_KEY_HELP = "Add your API key with the WEATHER_WIDGET_API_KEY setting or the 'api_key' option."
AUTH_HELP = "Get a free API key at OpenWeatherMap.org"


class WidgetView(BaseModel):
    status: str
    theme: str
    title: str
    message: str | None = None
    help_text: str | None = None
    help_link: str | None = None
    icon: str | None = None
    condition: str | None = None
    temperature_label: str | None = None
    feels_like_label: str | None = None
    wind_label: str | None = None
    humidity_label: str | None = None
    high_low_label: str | None = None


def temperature_unit(config: WidgetConfig) -> str:
    return "C" if config.units == "metric" else "F"


def wind_unit(config: WidgetConfig) -> str:
    return "m/s" if config.units == "metric" else "mph"


def build_view(state: RenderState, config: WidgetConfig) -> WidgetView:
    if isinstance(state, Loading):
        return WidgetView(status=state.kind, theme=config.theme, title="Loading weather data...")

    if isinstance(state, (Misconfigured, Failed)):
        error = state.error
        help_text = help_link = None
        if error.is_missing_key or not config.has_api_key:
            help_text = MISSING_KEY_HELP
        elif error.is_auth_error:
            help_text = AUTH_HELP
            help_link = SIGN_UP_URL
        return WidgetView(
            status=state.kind,
            theme=config.theme,
            title="Configuration Error" if isinstance(state, Misconfigured) else "Error",
            message=error.message,
            help_text=help_text,
            help_link=help_link,
        )

    if isinstance(state, Ready):
        snap = state.snapshot
        return WidgetView(
            status=state.kind,
            theme=config.theme,
            title=snap.city,
            icon=snap.icon,
            condition=snap.condition,
            temperature_label=f"{snap.temperature}°{temperature_unit(config)}",
            feels_like_label=f"{snap.feels_like}°",
            wind_label=f"{snap.wind_speed:g} {wind_unit(config)}",
            humidity_label=f"{snap.humidity}%",
            high_low_label=f"{snap.high}° / {snap.low}°",
        )

    raise TypeError(f"unknown render state: {state!r}")

"""Condition label to icon key mapping."""

from __future__ import annotations

from .schemas import IconKey

DEFAULT_ICON: IconKey = "Cloud"

CONDITION_ICONS: dict[str, IconKey] = {
    "Clear": "Sun",
    "Clouds": "Cloud",
    "Rain": "CloudRain",
    "Drizzle": "CloudRain",
    "Thunderstorm": "CloudLightning",
    "Snow": "CloudSnow",
    "Mist": "Cloud",
    "Fog": "Cloud",
    "Haze": "Cloud",
}


def map_condition_to_icon(condition: str | None) -> IconKey:
    # Exact match only; "rain" or "RAIN" fall through to the default.
    if not isinstance(condition, str):
        return DEFAULT_ICON
    return CONDITION_ICONS.get(condition, DEFAULT_ICON)

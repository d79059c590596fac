"""Shared widget models (single source of truth).

The host, the service and the presentation layer all consume these.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

Units = Literal["metric", "imperial"]
Theme = Literal["light", "dark"]
IconKey = Literal["Sun", "Cloud", "CloudRain", "CloudSnow", "CloudLightning", "Wind"]


class WidgetConfig(BaseModel):
    """Configuration for one fetch cycle; replaced wholesale on change."""

    model_config = ConfigDict(frozen=True)

    api_key: str = ""
    city: str = "New York"
    units: Units = "metric"
    theme: Theme = "light"

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @property
    def fetch_key(self) -> tuple[str, str, str]:
        """Fields whose change requires a new fetch cycle."""
        return (self.api_key, self.city, self.units)


class WeatherSnapshot(BaseModel):
    """Normalized result of one successful fetch."""

    model_config = ConfigDict(frozen=True)

    city: str
    temperature: int
    feels_like: int
    high: int
    low: int
    condition: str
    humidity: int
    wind_speed: float
    icon: IconKey


class ErrorKind(str, Enum):
    MISSING_KEY = "missing_key"
    INVALID_KEY = "invalid_key"
    CITY_NOT_FOUND = "city_not_found"
    NETWORK_FAILURE = "network_failure"
    UPSTREAM_OTHER = "upstream_other"


class ErrorInfo(BaseModel):
    """User-facing error. Flags only pick help text, never the message."""

    model_config = ConfigDict(frozen=True)

    message: str
    is_missing_key: bool = False
    is_auth_error: bool = False
    kind: ErrorKind = ErrorKind.UPSTREAM_OTHER


class UpstreamErrorBody(BaseModel):
    """Error body of a non-2xx OpenWeather response.

    ``cod`` arrives as either an int or a string depending on the endpoint.
    """

    model_config = ConfigDict(extra="ignore")

    cod: str | None = None
    message: str | None = None

    @field_validator("cod", mode="before")
    @classmethod
    def _normalize_cod(cls, value: object) -> str | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, str)):
            return str(value).strip() or None
        return None

    @field_validator("message", mode="before")
    @classmethod
    def _normalize_message(cls, value: object) -> str | None:
        return value if isinstance(value, str) and value else None


class Loading(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["loading"] = "loading"


class Misconfigured(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["misconfigured"] = "misconfigured"
    error: ErrorInfo


class Failed(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["failed"] = "failed"
    error: ErrorInfo


class Ready(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["ready"] = "ready"
    snapshot: WeatherSnapshot


RenderState = Annotated[Union[Loading, Misconfigured, Failed, Ready], Field(discriminator="kind")]

TERMINAL_STATES = (Misconfigured, Failed, Ready)

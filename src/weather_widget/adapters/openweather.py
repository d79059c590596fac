"""OpenWeather adapter.

Encapsulates upstream API details and error normalization.
"""

from __future__ import annotations

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..schemas import UpstreamErrorBody
from . import MalformedResponseError, UpstreamHTTPError, UpstreamNetworkError

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"


class _Main(BaseModel):
    model_config = ConfigDict(extra="ignore")

    temp: float
    feels_like: float
    temp_min: float
    temp_max: float
    humidity: int


class _Wind(BaseModel):
    model_config = ConfigDict(extra="ignore")

    speed: float


class _Condition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    main: str


class CurrentWeatherPayload(BaseModel):
    """The subset of /weather we render."""

    model_config = ConfigDict(extra="ignore")

    name: str
    main: _Main
    wind: _Wind
    weather: list[_Condition] = Field(min_length=1)

    @property
    def condition(self) -> str:
        return self.weather[0].main


def _parse_error_body(resp: httpx.Response) -> UpstreamErrorBody | None:
    # Error bodies are best effort; a proxy may answer with HTML.
    try:
        data = resp.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return UpstreamErrorBody.model_validate(data)
    except ValidationError:
        return None


async def fetch_current_weather(
    *,
    api_key: str,
    city: str,
    units: str,
    client: httpx.AsyncClient | None = None,
    base_url: str = OPENWEATHER_BASE_URL,
    timeout_s: float | None = None,
) -> CurrentWeatherPayload:
    params = {"q": city, "units": units, "appid": api_key}
    url = f"{base_url}/weather"

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout_s) as owned:
                resp = await owned.get(url, params=params)
        else:
            resp = await client.get(url, params=params)
    except httpx.TransportError as exc:
        raise UpstreamNetworkError(str(exc) or type(exc).__name__) from exc

    if not resp.is_success:
        raise UpstreamHTTPError(resp.status_code, _parse_error_body(resp))

    try:
        return CurrentWeatherPayload.model_validate(resp.json())
    except (ValueError, ValidationError) as exc:
        raise MalformedResponseError() from exc

"""Fetch failure classification.

Rules are applied in priority order: missing key, transport failure,
rejected key, unknown city, then whatever the upstream said.
"""

from __future__ import annotations

import httpx

from .adapters import AdapterError, UpstreamNetworkError
from .schemas import ErrorInfo, ErrorKind, UpstreamErrorBody, WidgetConfig

MISSING_KEY_MESSAGE = (
    "No API key provided. Please add a valid OpenWeatherMap API key using the 'api_key' option."
)
NETWORK_MESSAGE = "Network error. Please check your internet connection."
INVALID_KEY_MESSAGE = "Invalid API key. Please check your OpenWeatherMap API key."
NOT_AVAILABLE_MESSAGE = "Weather data not available"
FAILED_TO_LOAD_MESSAGE = "Failed to load weather data"


def city_not_found_message(city: str) -> str:
    return f'City "{city}" not found. Please check the city name.'


def _is_transport_failure(error: BaseException | None) -> bool:
    return isinstance(error, (UpstreamNetworkError, httpx.TransportError))


def _is_auth_rejection(http_status: int | None, payload: UpstreamErrorBody | None) -> bool:
    if http_status == 401:
        return True
    if payload is None:
        return False
    if payload.cod == "401":
        return True
    # Case-insensitive on purpose: OpenWeather says "Invalid API key", which a
    # literal "api key" match (as the browser widget did) never catches.
    return bool(payload.message and "api key" in payload.message.lower())


def _is_not_found(http_status: int | None, payload: UpstreamErrorBody | None) -> bool:
    return http_status == 404 or (payload is not None and payload.cod == "404")


def classify(
    config: WidgetConfig,
    *,
    http_status: int | None = None,
    payload: UpstreamErrorBody | None = None,
    error: BaseException | None = None,
) -> ErrorInfo:
    if not config.has_api_key:
        return ErrorInfo(message=MISSING_KEY_MESSAGE, is_missing_key=True, kind=ErrorKind.MISSING_KEY)

    if _is_transport_failure(error):
        return ErrorInfo(message=NETWORK_MESSAGE, kind=ErrorKind.NETWORK_FAILURE)

    if _is_auth_rejection(http_status, payload):
        return ErrorInfo(message=INVALID_KEY_MESSAGE, is_auth_error=True, kind=ErrorKind.INVALID_KEY)

    if _is_not_found(http_status, payload):
        return ErrorInfo(message=city_not_found_message(config.city), kind=ErrorKind.CITY_NOT_FOUND)

    if payload is not None and payload.message:
        message = payload.message
    elif http_status is not None:
        message = NOT_AVAILABLE_MESSAGE
    elif isinstance(error, AdapterError):
        message = error.message
    elif error is not None:
        message = str(error) or FAILED_TO_LOAD_MESSAGE
    else:
        message = NOT_AVAILABLE_MESSAGE
    return ErrorInfo(message=message, kind=ErrorKind.UPSTREAM_OTHER)

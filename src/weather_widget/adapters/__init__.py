"""External API adapters."""

from __future__ import annotations

from typing import Any


class AdapterError(RuntimeError):
    def __init__(self, code: str, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}


class UpstreamNetworkError(AdapterError):
    """The request never got a response (DNS, connect, reset)."""

    def __init__(self, message: str) -> None:
        super().__init__("NETWORK_ERROR", message)


class UpstreamHTTPError(AdapterError):
    """Non-2xx response; ``body`` is the parsed error payload, if any."""

    def __init__(self, status_code: int, body: Any | None) -> None:
        message = getattr(body, "message", None) or f"Upstream returned HTTP {status_code}"
        super().__init__("UPSTREAM_ERROR", message, {"status_code": status_code})
        self.status_code = status_code
        self.body = body


class MalformedResponseError(AdapterError):
    def __init__(self, message: str = "Malformed weather data received") -> None:
        super().__init__("BAD_RESPONSE", message)

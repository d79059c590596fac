"""One fetch cycle: config in, exactly one terminal render state out."""

from __future__ import annotations

import asyncio
import math
import time

import httpx

from .adapters import UpstreamHTTPError
from .adapters.openweather import OPENWEATHER_BASE_URL, CurrentWeatherPayload, fetch_current_weather
from .classifier import classify
from .icons import map_condition_to_icon
from .logging import get_logger
from .schemas import Failed, Misconfigured, Ready, RenderState, WeatherSnapshot, WidgetConfig

logger = get_logger("orchestrator")


def round_half_up(value: float) -> int:
    """Round like the browser does: halves go towards +inf (-2.5 -> -2)."""
    return math.floor(value + 0.5)


def build_snapshot(payload: CurrentWeatherPayload) -> WeatherSnapshot:
    main = payload.main
    return WeatherSnapshot(
        city=payload.name,
        temperature=round_half_up(main.temp),
        feels_like=round_half_up(main.feels_like),
        high=round_half_up(main.temp_max),
        low=round_half_up(main.temp_min),
        condition=payload.condition,
        humidity=main.humidity,
        wind_speed=payload.wind.speed,
        icon=map_condition_to_icon(payload.condition),
    )


async def run_fetch_cycle(
    config: WidgetConfig,
    *,
    client: httpx.AsyncClient | None = None,
    base_url: str = OPENWEATHER_BASE_URL,
    timeout_s: float | None = None,
) -> RenderState:
    if not config.has_api_key:
        # Never touch the network without a key.
        state: RenderState = Misconfigured(error=classify(config))
        _log_cycle(config, state, latency_ms=0)
        return state

    start = time.time()
    try:
        payload = await fetch_current_weather(
            api_key=config.api_key,
            city=config.city,
            units=config.units,
            client=client,
            base_url=base_url,
            timeout_s=timeout_s,
        )
        state = Ready(snapshot=build_snapshot(payload))
    except asyncio.CancelledError:
        raise
    except UpstreamHTTPError as exc:
        state = Failed(error=classify(config, http_status=exc.status_code, payload=exc.body))
    except Exception as exc:  # noqa: BLE001
        logger.info(
            "fetch_cycle_exception",
            extra={"extra": {"city": config.city, "error_type": type(exc).__name__, "error": str(exc)}},
        )
        state = Failed(error=classify(config, error=exc))

    _log_cycle(config, state, latency_ms=int((time.time() - start) * 1000))
    return state


def _log_cycle(config: WidgetConfig, state: RenderState, *, latency_ms: int) -> None:
    error = getattr(state, "error", None)
    logger.info(
        "fetch_cycle",
        extra={
            "extra": {
                "city": config.city,
                "units": config.units,
                "outcome": state.kind,
                "latency_ms": latency_ms,
                "error_kind": error.kind.value if error else None,
            }
        },
    )

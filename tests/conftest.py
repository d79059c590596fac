from __future__ import annotations

import asyncio

import pytest

from weather_widget.schemas import Ready, WeatherSnapshot, WidgetConfig
from weather_widget.settings import get_settings


def weather_payload(
    *,
    name: str = "London",
    temp: float = 21.6,
    feels_like: float = 20.4,
    temp_max: float = 23.9,
    temp_min: float = 18.1,
    humidity: int = 55,
    wind_speed: float = 3.2,
    condition: str = "Rain",
) -> dict:
    return {
        "name": name,
        "cod": 200,
        "main": {
            "temp": temp,
            "feels_like": feels_like,
            "temp_min": temp_min,
            "temp_max": temp_max,
            "humidity": humidity,
            "pressure": 1012,
        },
        "wind": {"speed": wind_speed, "deg": 240},
        "weather": [{"id": 500, "main": condition, "description": "light rain", "icon": "10d"}],
    }


def ready_state(city: str = "London") -> Ready:
    return Ready(
        snapshot=WeatherSnapshot(
            city=city,
            temperature=22,
            feels_like=20,
            high=24,
            low=18,
            condition="Rain",
            humidity=55,
            wind_speed=3.2,
            icon="CloudRain",
        )
    )


async def drain(rounds: int = 20) -> None:
    """Let every ready task on the loop run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ManualClock:
    """Injected ``sleep`` whose time only moves on ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self._sleepers: list[tuple[float, asyncio.Future]] = []

    async def sleep(self, delay: float) -> None:
        fut = asyncio.get_running_loop().create_future()
        self._sleepers.append((self.now + delay, fut))
        try:
            await fut
        finally:
            self._sleepers = [item for item in self._sleepers if item[1] is not fut]

    async def advance(self, seconds: float) -> None:
        self.now += seconds
        for deadline, fut in list(self._sleepers):
            if deadline <= self.now and not fut.done():
                fut.set_result(None)
        await drain()


class GatedFetch:
    """Fetch stand-in: records calls, each call waits for its own gate."""

    def __init__(self, *, gated: bool = False) -> None:
        self.calls: list[WidgetConfig] = []
        self.gates: list[asyncio.Event] = []
        self._gated = gated

    async def __call__(self, config: WidgetConfig):
        self.calls.append(config)
        gate = asyncio.Event()
        if not self._gated:
            gate.set()
        self.gates.append(gate)
        await gate.wait()
        return ready_state(f"{config.city}#{len(self.calls)}")


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    for name in ("OPENWEATHER_API_KEY", "WEATHER_WIDGET_API_KEY", "WEATHER_WIDGET_CITY"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

"""Widget host: owns config, refresh handle and render state."""

from __future__ import annotations

from functools import partial
from typing import Callable

import httpx

from .logging import get_logger
from .orchestrator import run_fetch_cycle
from .presenter import WidgetView, build_view
from .scheduler import RefreshHandle, RefreshScheduler
from .schemas import RenderState, WidgetConfig
from .settings import WidgetSettings, get_settings
from .state import RenderStateMachine, StateListener

logger = get_logger("widget")


class WidgetNotRunning(RuntimeError):
    pass


class WeatherWidget:
    """One mounted widget.

    ``reconfigure`` replaces the old refresh handle completely; there is
    never more than one live timer per widget.
    """

    def __init__(
        self,
        config: WidgetConfig,
        *,
        settings: WidgetSettings | None = None,
        client: httpx.AsyncClient | None = None,
        scheduler: RefreshScheduler | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._config = config
        self._owns_client = client is None
        self._client = client
        self._scheduler = scheduler
        self._machine = RenderStateMachine()
        self._handle: RefreshHandle | None = None
        self._closed = False

    @property
    def config(self) -> WidgetConfig:
        return self._config

    @property
    def state(self) -> RenderState:
        return self._machine.state

    @property
    def running(self) -> bool:
        return self._handle is not None and self._handle.active

    @property
    def handle(self) -> RefreshHandle | None:
        return self._handle

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        return self._machine.subscribe(listener)

    def view(self) -> WidgetView:
        return build_view(self._machine.state, self._config)

    async def start(self) -> None:
        if self._closed:
            raise WidgetNotRunning("widget has been torn down")
        if self.running:
            raise RuntimeError("widget already started")
        if self._scheduler is None:
            self._scheduler = self._build_scheduler()
        self._handle = self._scheduler.start(
            self._config,
            on_cycle=self._machine.resolve,
            on_start=self._machine.begin_cycle,
        )
        logger.info(
            "widget_started",
            extra={
                "extra": {
                    "city": self._config.city,
                    "units": self._config.units,
                    "theme": self._config.theme,
                    "api_key_set": self._config.has_api_key,
                }
            },
        )

    async def reconfigure(self, config: WidgetConfig) -> None:
        if self._closed:
            raise WidgetNotRunning("widget has been torn down")
        previous = self._config
        self._config = config
        if self.running and config.fetch_key == previous.fetch_key:
            if config.theme != previous.theme:
                # Presentation only; keep the current cycle.
                self._machine.notify()
            return
        self._release_handle()
        await self.start()

    async def teardown(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._release_handle()
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
        logger.info("widget_torn_down", extra={"extra": {"city": self._config.city}})

    async def settle(self) -> None:
        if self._handle is not None:
            await self._handle.settle()

    def _release_handle(self) -> None:
        if self._handle is not None and self._scheduler is not None:
            self._scheduler.cancel(self._handle)
        self._handle = None

    def _build_scheduler(self) -> RefreshScheduler:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.request_timeout_s)
        fetch = partial(
            run_fetch_cycle,
            client=self._client,
            base_url=self._settings.openweather_base_url,
        )
        return RefreshScheduler(fetch, interval_s=self._settings.refresh_interval_s)

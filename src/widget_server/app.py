"""FastAPI host for a single weather widget.

The widget is mounted at startup and torn down at shutdown; everything in
between is read-through to its current render state.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from weather_widget.logging import get_logger
from weather_widget.presenter import WidgetView
from weather_widget.schemas import RenderState, Theme, Units, WidgetConfig
from weather_widget.settings import get_settings, resolve_config
from weather_widget.widget import WeatherWidget

logger = get_logger("widget_server")

app = FastAPI(title="Weather Widget Service", version="0.1.0")


class ConfigUpdate(BaseModel):
    api_key: str | None = None
    city: str | None = None
    units: Units | None = None
    theme: Theme | None = None


class ConfigOut(BaseModel):
    city: str
    units: Units
    theme: Theme
    api_key_set: bool


class StateOut(BaseModel):
    state: RenderState
    view: WidgetView


def _config_out(config: WidgetConfig) -> ConfigOut:
    return ConfigOut(city=config.city, units=config.units, theme=config.theme, api_key_set=config.has_api_key)


def _get_widget(request: Request) -> WeatherWidget:
    widget = getattr(request.app.state, "widget", None)
    if widget is None:
        raise HTTPException(status_code=503, detail="Widget is not running")
    return widget


@app.on_event("startup")
async def mount_widget() -> None:
    settings = get_settings()
    widget = WeatherWidget(settings.default_config(), settings=settings)
    await widget.start()
    app.state.widget = widget
    logger.info(
        "widget_server_config",
        extra={
            "extra": {
                "city": settings.city,
                "units": settings.units,
                "api_key_set": bool(settings.api_key.strip()),
                "refresh_interval_s": settings.refresh_interval_s,
            }
        },
    )


@app.on_event("shutdown")
async def unmount_widget() -> None:
    widget = getattr(app.state, "widget", None)
    if widget is not None:
        await widget.teardown()
        app.state.widget = None


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/widget/state")
async def widget_state(request: Request, settle: bool = False) -> StateOut:
    widget = _get_widget(request)
    if settle:
        await widget.settle()
    return StateOut(state=widget.state, view=widget.view())


@app.get("/widget/config")
def widget_config(request: Request) -> ConfigOut:
    return _config_out(_get_widget(request).config)


@app.put("/widget/config")
async def update_widget_config(payload: ConfigUpdate, request: Request) -> ConfigOut:
    widget = _get_widget(request)
    options: dict[str, Any] = payload.model_dump(exclude_none=True)
    config = resolve_config(options, defaults=get_settings().default_config(), current=widget.config)
    await widget.reconfigure(config)
    logger.info(
        "widget_reconfigured",
        extra={"extra": {"fields": sorted(options), "city": config.city, "units": config.units}},
    )
    return _config_out(config)

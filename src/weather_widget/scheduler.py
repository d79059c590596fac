"""Periodic refresh of the weather fetch cycle.

Each ``start`` returns a ``RefreshHandle`` that owns one timer. The owner
must release it through ``cancel`` when the config changes or the widget
goes away. Results are only delivered for the newest cycle of an active
handle; anything older, or anything that finishes after ``cancel``, is
dropped.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Awaitable, Callable

from .classifier import classify
from .logging import get_logger
from .schemas import Failed, Misconfigured, RenderState, WidgetConfig

logger = get_logger("scheduler")

DEFAULT_INTERVAL_S = 15 * 60

FetchCycle = Callable[[WidgetConfig], Awaitable[RenderState]]
CycleListener = Callable[[RenderState], None]
CycleStartListener = Callable[[], None]
SleepFn = Callable[[float], Awaitable[object]]

_handle_ids = itertools.count(1)


class RefreshHandle:
    def __init__(self, config: WidgetConfig) -> None:
        self.id = next(_handle_ids)
        self.config = config
        self._active = True
        self._seq = 0
        self._timer: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()

    @property
    def active(self) -> bool:
        return self._active

    @property
    def cycles_started(self) -> int:
        return self._seq

    def _next_seq(self) -> int:
        self._seq += 1
        return self._seq

    def is_current(self, seq: int) -> bool:
        return self._active and seq == self._seq

    async def settle(self) -> None:
        """Wait until no fetch started by this handle is in flight."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def __repr__(self) -> str:
        return f"RefreshHandle(id={self.id}, active={self._active}, cycles={self._seq})"


class RefreshScheduler:
    def __init__(
        self,
        fetch: FetchCycle,
        *,
        interval_s: float = DEFAULT_INTERVAL_S,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self._fetch = fetch
        self._interval_s = interval_s
        self._sleep = sleep

    @property
    def interval_s(self) -> float:
        return self._interval_s

    def start(
        self,
        config: WidgetConfig,
        on_cycle: CycleListener,
        on_start: CycleStartListener | None = None,
    ) -> RefreshHandle:
        """Run one cycle now, then one per interval. Needs a running loop."""
        handle = RefreshHandle(config)
        self._begin_cycle(handle, on_cycle, on_start)
        handle._timer = asyncio.create_task(
            self._tick(handle, on_cycle, on_start), name=f"weather-refresh-{handle.id}"
        )
        logger.info(
            "refresh_started",
            extra={"extra": {"handle": handle.id, "city": config.city, "interval_s": self._interval_s}},
        )
        return handle

    def cancel(self, handle: RefreshHandle) -> None:
        if not handle._active:
            return
        handle._active = False
        if handle._timer is not None:
            handle._timer.cancel()
        logger.info(
            "refresh_cancelled",
            extra={"extra": {"handle": handle.id, "in_flight": len(handle._pending)}},
        )

    async def _tick(
        self,
        handle: RefreshHandle,
        on_cycle: CycleListener,
        on_start: CycleStartListener | None,
    ) -> None:
        while handle.active:
            await self._sleep(self._interval_s)
            if not handle.active:
                return
            if not handle.config.has_api_key:
                # The missing-key error is already showing; don't repeat it every tick.
                logger.info("refresh_tick_skipped", extra={"extra": {"handle": handle.id}})
                continue
            self._begin_cycle(handle, on_cycle, on_start)

    def _begin_cycle(
        self,
        handle: RefreshHandle,
        on_cycle: CycleListener,
        on_start: CycleStartListener | None,
    ) -> None:
        seq = handle._next_seq()
        if on_start is not None:
            on_start()
        task = asyncio.create_task(self._run_cycle(handle, seq, on_cycle))
        handle._pending.add(task)
        task.add_done_callback(handle._pending.discard)

    async def _run_cycle(self, handle: RefreshHandle, seq: int, on_cycle: CycleListener) -> None:
        try:
            state = await self._fetch(handle.config)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error(
                "refresh_cycle_error",
                exc_info=True,
                extra={"extra": {"handle": handle.id, "seq": seq}},
            )
            error = classify(handle.config, error=exc)
            state = Failed(error=error) if handle.config.has_api_key else Misconfigured(error=error)

        if not handle.is_current(seq):
            logger.info(
                "stale_cycle_dropped",
                extra={"extra": {"handle": handle.id, "seq": seq, "active": handle.active, "outcome": state.kind}},
            )
            return
        on_cycle(state)

"""Render state container."""

from __future__ import annotations

from typing import Callable

from .logging import get_logger
from .schemas import TERMINAL_STATES, Loading, RenderState

logger = get_logger("state")

StateListener = Callable[[RenderState], None]


class RenderStateMachine:
    """Holds the single authoritative render state.

    Every cycle goes ``Loading`` -> one of ``Misconfigured`` / ``Failed`` /
    ``Ready``. Subscribers hear about every transition, in order.
    """

    def __init__(self) -> None:
        self._state: RenderState = Loading()
        self._listeners: list[StateListener] = []
        self._transitions = 0

    @property
    def state(self) -> RenderState:
        return self._state

    @property
    def transitions(self) -> int:
        return self._transitions

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def begin_cycle(self) -> None:
        # Unconditional: stale data never survives into a new cycle.
        self._set(Loading())

    def resolve(self, state: RenderState) -> None:
        if not isinstance(state, TERMINAL_STATES):
            raise ValueError(f"cannot resolve a cycle with {type(state).__name__}")
        self._set(state)

    def notify(self) -> None:
        """Re-emit the current state without a transition."""
        self._emit()

    def _set(self, state: RenderState) -> None:
        previous = self._state
        self._state = state
        self._transitions += 1
        logger.debug(
            "render_state_transition",
            extra={"extra": {"from": previous.kind, "to": state.kind}},
        )
        self._emit()

    def _emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:  # noqa: BLE001
                logger.error("render_listener_error", exc_info=True)

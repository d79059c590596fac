import pytest

from conftest import ready_state
from weather_widget.schemas import ErrorInfo, Failed, Loading, Misconfigured
from weather_widget.state import RenderStateMachine


def test_starts_loading_and_every_cycle_resets_to_loading():
    machine = RenderStateMachine()
    assert isinstance(machine.state, Loading)

    machine.resolve(ready_state())
    assert machine.state.kind == "ready"

    machine.begin_cycle()
    assert isinstance(machine.state, Loading)

    machine.resolve(Failed(error=ErrorInfo(message="Weather data not available")))
    assert machine.state.kind == "failed"
    assert not hasattr(machine.state, "snapshot")


def test_resolve_rejects_loading():
    machine = RenderStateMachine()
    with pytest.raises(ValueError):
        machine.resolve(Loading())


def test_subscribers_see_every_transition_in_order():
    machine = RenderStateMachine()
    seen = []
    unsubscribe = machine.subscribe(lambda state: seen.append(state.kind))

    machine.begin_cycle()
    machine.resolve(Misconfigured(error=ErrorInfo(message="No API key", is_missing_key=True)))
    machine.notify()
    unsubscribe()
    machine.begin_cycle()

    assert seen == ["loading", "misconfigured", "misconfigured"]
    assert machine.transitions == 3


def test_listener_errors_do_not_break_the_machine():
    machine = RenderStateMachine()
    seen = []

    def broken(state):
        raise RuntimeError("render bug")

    machine.subscribe(broken)
    machine.subscribe(lambda state: seen.append(state.kind))
    machine.resolve(ready_state())

    assert seen == ["ready"]
    assert machine.state.kind == "ready"

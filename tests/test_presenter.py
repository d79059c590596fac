from conftest import ready_state
from weather_widget.presenter import SIGN_UP_URL, build_view
from weather_widget.schemas import ErrorInfo, ErrorKind, Failed, Loading, Misconfigured, WidgetConfig


def test_ready_view_uses_unit_labels():
    metric = build_view(ready_state("London"), WidgetConfig(api_key="k"))
    assert metric.title == "London"
    assert metric.temperature_label == "22°C"
    assert metric.wind_label == "3.2 m/s"
    assert metric.humidity_label == "55%"
    assert metric.high_low_label == "24° / 18°"
    assert metric.icon == "CloudRain"

    imperial = build_view(ready_state(), WidgetConfig(api_key="k", units="imperial", theme="dark"))
    assert imperial.temperature_label == "22°F"
    assert imperial.wind_label == "3.2 mph"
    assert imperial.theme == "dark"


def test_loading_view():
    view = build_view(Loading(), WidgetConfig())
    assert view.status == "loading"
    assert view.message is None


def test_missing_key_view_explains_how_to_add_one():
    state = Misconfigured(error=ErrorInfo(message="No API key provided.", is_missing_key=True, kind=ErrorKind.MISSING_KEY))
    view = build_view(state, WidgetConfig())
    assert view.title == "Configuration Error"
    assert "api_key" in view.help_text
    assert view.help_link is None


def test_auth_error_view_links_to_sign_up():
    state = Failed(error=ErrorInfo(message="Invalid API key.", is_auth_error=True, kind=ErrorKind.INVALID_KEY))
    view = build_view(state, WidgetConfig(api_key="bad"))
    assert view.title == "Error"
    assert view.help_link == SIGN_UP_URL


def test_plain_failure_has_no_help():
    state = Failed(error=ErrorInfo(message='City "Atlantis" not found.', kind=ErrorKind.CITY_NOT_FOUND))
    view = build_view(state, WidgetConfig(api_key="k", city="Atlantis"))
    assert view.message == 'City "Atlantis" not found.'
    assert view.help_text is None

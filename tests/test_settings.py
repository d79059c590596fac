from weather_widget.schemas import WidgetConfig
from weather_widget.settings import WidgetSettings, get_settings, resolve_config


def test_defaults_match_host_contract():
    settings = WidgetSettings()
    assert settings.default_config() == WidgetConfig(api_key="", city="New York", units="metric", theme="light")
    assert settings.refresh_interval_s == 900
    assert settings.request_timeout_s is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("OPENWEATHER_API_KEY", "from-env")
    monkeypatch.setenv("WEATHER_WIDGET_CITY", "Helsinki")
    monkeypatch.setenv("WEATHER_WIDGET_UNITS", "imperial")
    get_settings.cache_clear()

    config = get_settings().default_config()
    assert config.api_key == "from-env"
    assert config.city == "Helsinki"
    assert config.units == "imperial"


def test_resolve_config_falls_back_per_field():
    config = resolve_config({"city": "   ", "units": "kelvin", "theme": "dark", "api_key": " abc "})
    assert config.city == "New York"
    assert config.units == "metric"
    assert config.theme == "dark"
    assert config.api_key == "abc"


def test_resolve_config_keeps_current_values():
    current = WidgetConfig(api_key="k", city="Lima", units="imperial")
    assert resolve_config({"theme": "dark"}, current=current) == current.model_copy(update={"theme": "dark"})
    assert resolve_config({}, current=current) == current
    assert resolve_config({"city": None}, current=current) == current


def test_blank_options_reset_to_host_defaults_not_current():
    host = WidgetConfig(api_key="", city="New York")
    current = WidgetConfig(api_key="abc", city="Tokyo", units="imperial", theme="dark")

    config = resolve_config({"api_key": "", "city": "  "}, defaults=host, current=current)

    assert config.api_key == ""
    assert not config.has_api_key
    assert config.city == "New York"
    assert config.units == "imperial"
    assert config.theme == "dark"

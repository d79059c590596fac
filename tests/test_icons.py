import pytest

from weather_widget.icons import CONDITION_ICONS, map_condition_to_icon


@pytest.mark.parametrize(
    "condition, icon",
    [
        ("Clear", "Sun"),
        ("Clouds", "Cloud"),
        ("Rain", "CloudRain"),
        ("Drizzle", "CloudRain"),
        ("Thunderstorm", "CloudLightning"),
        ("Snow", "CloudSnow"),
        ("Mist", "Cloud"),
        ("Fog", "Cloud"),
        ("Haze", "Cloud"),
    ],
)
def test_known_conditions_map_exactly(condition, icon):
    assert map_condition_to_icon(condition) == icon


@pytest.mark.parametrize("condition", ["", "rain", "CLEAR", "Tornado", "Smoke", " Rain", None])
def test_unknown_conditions_default_to_cloud(condition):
    assert map_condition_to_icon(condition) == "Cloud"


def test_table_never_produces_wind():
    # Wind is a valid icon key but no condition maps to it.
    assert "Wind" not in CONDITION_ICONS.values()

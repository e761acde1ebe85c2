# -*- coding: utf-8 -*-
"""
Тесты для WeatherQuery и DisplayState
"""
import json

import pytest

from core.models.display_state import DisplayState, TemperatureUnit
from core.models.weather_query import WeatherQuery
from core.models.weather_response import WeatherResponse


def test_coordinates_param():
    query = WeatherQuery.from_coordinates(37.7749, -122.4194)
    assert query.is_coordinates
    assert query.to_param() == "37.7749,-122.4194"


@pytest.mark.parametrize("lat, lon, expected", [
    (0.000012, 30.5, "0.000012,30.5"),
    (0.0, 0.0, "0,0"),
    (-33.8688, 151.2093, "-33.8688,151.2093"),
])
def test_coordinates_param_is_plain_decimal(lat, lon, expected):
    assert WeatherQuery.from_coordinates(lat, lon).to_param() == expected


def test_text_param_is_passed_as_is():
    query = WeatherQuery.from_text("New York")
    assert not query.is_coordinates
    assert query.to_param() == "New York"


@pytest.mark.parametrize("kwargs", [
    {},
    {"text": "London", "latitude": 1.0, "longitude": 2.0},
    {"latitude": 1.0},
])
def test_query_needs_exactly_one_form(kwargs):
    with pytest.raises(ValueError):
        WeatherQuery(**kwargs)


def test_unit_toggle_and_pick(sample_payload):
    weather = WeatherResponse.from_json(json.dumps(sample_payload))
    assert TemperatureUnit.CELSIUS.toggled() is TemperatureUnit.FAHRENHEIT
    assert TemperatureUnit.FAHRENHEIT.toggled() is TemperatureUnit.CELSIUS
    assert TemperatureUnit.CELSIUS.pick(weather) == 11.0
    assert TemperatureUnit.FAHRENHEIT.pick(weather) == 51.8


def test_temperature_text():
    state = DisplayState(temperature_value=-3.4, unit=TemperatureUnit.CELSIUS)
    assert state.temperature_text == "-3.4 °C"
    state.temperature_value = 51.8
    state.unit = TemperatureUnit.FAHRENHEIT
    assert state.temperature_text == "51.8 °F"


def test_empty_state():
    state = DisplayState()
    assert state.temperature_text == ""
    assert not state.has_weather
    assert state.icon is None
    assert state.controls_enabled


def test_loading_disables_controls():
    state = DisplayState(is_loading=True)
    assert not state.controls_enabled

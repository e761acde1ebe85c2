# -*- coding: utf-8 -*-
"""
Тесты для core/models/weather_response.py
"""
import json

import pytest
from pydantic import ValidationError

from core.errors import WeatherDecodeError
from core.models.weather_response import WeatherResponse


def test_decode_keeps_both_readings_verbatim(sample_payload):
    sample_payload["current"]["temp_c"] = 21.3
    sample_payload["current"]["temp_f"] = 70.3
    weather = WeatherResponse.from_json(json.dumps(sample_payload).encode())

    assert weather.location_name == "London"
    assert weather.condition_text == "Partly cloudy"
    assert weather.current.temp_c == 21.3
    assert weather.current.temp_f == 70.3  # без пересчёта на клиенте
    print("✅ test_decode_keeps_both_readings_verbatim passed")


def test_integer_temperatures_are_accepted(sample_payload):
    sample_payload["current"]["temp_c"] = 0
    sample_payload["current"]["temp_f"] = 32
    weather = WeatherResponse.from_json(json.dumps(sample_payload))
    assert weather.current.temp_c == 0.0
    assert weather.current.temp_f == 32.0


@pytest.mark.parametrize("field, value", [
    ("temp_c", "11.0"),
    ("temp_f", True),
    ("temp_c", None),
    ("text", 116),
])
def test_wrong_json_types_raise_decode_error(sample_payload, field, value):
    if field == "text":
        sample_payload["current"]["condition"]["text"] = value
    else:
        sample_payload["current"][field] = value
    with pytest.raises(WeatherDecodeError):
        WeatherResponse.from_json(json.dumps(sample_payload))


def test_icon_url_prefixes_scheme(sample_payload):
    weather = WeatherResponse.from_json(json.dumps(sample_payload))
    assert weather.icon_url() == "https://cdn.weatherapi.com/weather/64x64/day/116.png"
    assert weather.icon_url("http:") == "http://cdn.weatherapi.com/weather/64x64/day/116.png"


@pytest.mark.parametrize("body", [b"", b"<html>502 Bad Gateway</html>", b"{not json", b"[]", b"null"])
def test_malformed_body_raises_decode_error(body):
    with pytest.raises(WeatherDecodeError):
        WeatherResponse.from_json(body)


def test_missing_field_raises_decode_error(sample_payload):
    del sample_payload["current"]["temp_f"]
    with pytest.raises(WeatherDecodeError):
        WeatherResponse.from_json(json.dumps(sample_payload))


def test_api_error_payload_raises_decode_error():
    body = json.dumps({"error": {"code": 1006, "message": "No matching location found."}})
    with pytest.raises(WeatherDecodeError):
        WeatherResponse.from_json(body)


def test_response_is_immutable(sample_payload):
    weather = WeatherResponse.from_json(json.dumps(sample_payload))
    with pytest.raises(ValidationError):
        weather.location.name = "Paris"

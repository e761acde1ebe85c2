# -*- coding: utf-8 -*-
"""
Общие фикстуры: поддельный weatherapi.com на httpx.MockTransport
и запись событий шины.
"""
import copy

import httpx
import pytest

from core.event_bus import clear_all_handlers, subscribe_async
from core.utils.api_client import WeatherApiClient

API_HOST = "api.weatherapi.com"
ICON_BYTES = b"\x89PNG\r\n\x1a\nfake-icon"

SAMPLE_PAYLOAD = {
    "location": {
        "name": "London",
        "region": "City of London, Greater London",
        "country": "United Kingdom",
        "lat": 51.52,
        "lon": -0.11
    },
    "current": {
        "last_updated": "2024-11-04 12:00",
        "temp_c": 11.0,
        "temp_f": 51.8,
        "is_day": 1,
        "condition": {
            "text": "Partly cloudy",
            "icon": "//cdn.weatherapi.com/weather/64x64/day/116.png",
            "code": 1003
        },
        "wind_kph": 13.0
    }
}


class FakeWeatherApi:
    """Обработчик для MockTransport: отвечает за API и за CDN иконок."""

    def __init__(self, payload):
        self.payload = payload
        self.current_status = 200
        self.current_body = None
        self.current_error = None
        self.icon_status = 200
        self.icon_bytes = ICON_BYTES
        self.icon_error = None
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == API_HOST:
            if self.current_error is not None:
                raise self.current_error
            if self.current_body is not None:
                return httpx.Response(self.current_status, content=self.current_body)
            return httpx.Response(self.current_status, json=self.payload)

        if self.icon_error is not None:
            raise self.icon_error
        return httpx.Response(self.icon_status, content=self.icon_bytes)

    @property
    def current_requests(self):
        return [r for r in self.requests if r.url.host == API_HOST]

    @property
    def icon_requests(self):
        return [r for r in self.requests if r.url.host != API_HOST]


class EventRecorder:
    def __init__(self):
        self.events = []

    def listen(self, *event_types):
        for event_type in event_types:
            async def handler(event, _type=event_type):
                self.events.append((_type, event))
            subscribe_async(event_type, handler)

    @property
    def types(self):
        return [event_type for event_type, _ in self.events]

    def of(self, event_type):
        return [event for t, event in self.events if t == event_type]


@pytest.fixture(autouse=True)
def _clean_event_bus():
    yield
    clear_all_handlers()


@pytest.fixture
def sample_payload():
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture
def fake_api(sample_payload):
    return FakeWeatherApi(sample_payload)


@pytest.fixture
async def api_client(fake_api):
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake_api))
    client = WeatherApiClient(api_key="test-key", client=http)
    yield client
    await http.aclose()


@pytest.fixture
def recorder():
    rec = EventRecorder()
    rec.listen("weather_loading", "weather_updated", "weather_icon", "weather_error")
    return rec

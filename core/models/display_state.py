# core/models/display_state.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.models.weather_response import WeatherResponse


class TemperatureUnit(str, Enum):
    CELSIUS = "C"
    FAHRENHEIT = "F"

    @property
    def symbol(self) -> str:
        return f"°{self.value}"

    def toggled(self) -> "TemperatureUnit":
        if self is TemperatureUnit.CELSIUS:
            return TemperatureUnit.FAHRENHEIT
        return TemperatureUnit.CELSIUS

    def pick(self, response: WeatherResponse) -> float:
        """Нужное из двух показаний, без пересчёта."""
        if self is TemperatureUnit.CELSIUS:
            return response.current.temp_c
        return response.current.temp_f


@dataclass
class DisplayState:
    """То, что сейчас на экране. При icon=None показывается заглушка."""
    location_name: str = ""
    condition_text: str = ""
    temperature_value: Optional[float] = None
    unit: TemperatureUnit = TemperatureUnit.CELSIUS
    icon: Optional[bytes] = None
    is_loading: bool = False

    @property
    def temperature_text(self) -> str:
        if self.temperature_value is None:
            return ""
        return f"{self.temperature_value:.1f} {self.unit.symbol}"

    @property
    def controls_enabled(self) -> bool:
        return not self.is_loading

    @property
    def has_weather(self) -> bool:
        return self.temperature_value is not None

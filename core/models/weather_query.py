# core/models/weather_query.py
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class WeatherQuery:
    """Один запрос погоды: либо название места, либо пара координат."""
    text: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def __post_init__(self):
        has_text = self.text is not None
        has_coords = self.latitude is not None and self.longitude is not None
        partial_coords = (self.latitude is None) != (self.longitude is None)
        if partial_coords or has_text == has_coords:
            raise ValueError("WeatherQuery needs either text or (latitude, longitude), not both")

    @classmethod
    def from_text(cls, text: str) -> "WeatherQuery":
        return cls(text=text)

    @classmethod
    def from_coordinates(cls, latitude: float, longitude: float) -> "WeatherQuery":
        return cls(latitude=float(latitude), longitude=float(longitude))

    @property
    def is_coordinates(self) -> bool:
        return self.text is None

    def to_param(self) -> str:
        """Значение параметра q: 'London' или '37.7749,-122.4194'."""
        if self.is_coordinates:
            return f"{_decimal(self.latitude)},{_decimal(self.longitude)}"
        return self.text


def _decimal(value: float) -> str:
    # Без экспоненты: 1.2e-05 → 0.000012
    return f"{value:.6f}".rstrip("0").rstrip(".")

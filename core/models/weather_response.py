# core/models/weather_response.py
"""
Pydantic-схема ответа weatherapi.com (/v1/current.json).

Берём только поля, которые показываются на экране; остальное игнорируется.
Обе температуры приходят от API, на клиенте ничего не пересчитываем.
"""
import json
import logging
from typing import Union

from pydantic import BaseModel, ConfigDict, ValidationError

from core.errors import WeatherDecodeError

logger = logging.getLogger("weather_response")


class _Frozen(BaseModel):
    # strict: строки и bool вместо чисел не принимаются, int для float допустим
    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)


class Location(_Frozen):
    name: str


class Condition(_Frozen):
    text: str
    icon: str


class CurrentWeather(_Frozen):
    temp_c: float
    temp_f: float
    condition: Condition


class WeatherResponse(_Frozen):
    location: Location
    current: CurrentWeather

    @property
    def location_name(self) -> str:
        return self.location.name

    @property
    def condition_text(self) -> str:
        return self.current.condition.text

    def icon_url(self, scheme: str = "https:") -> str:
        """Иконка приходит как '//cdn.weatherapi.com/...', схему добавляем сами."""
        return f"{scheme}{self.current.condition.icon}"

    @classmethod
    def from_json(cls, body: Union[bytes, str]) -> "WeatherResponse":
        """
        Декодирует тело ответа.

        Raises:
            WeatherDecodeError: битый JSON или неожиданная структура
        """
        try:
            return cls.model_validate_json(body)
        except ValidationError as e:
            api_error = _api_error_message(body)
            if api_error:
                logger.warning(f"⚠️ API вернул ошибку: {api_error}")
            raise WeatherDecodeError(f"Неожиданная структура ответа: {e.error_count()} ошибок") from e


def _api_error_message(body) -> str:
    # {"error": {"code": 1006, "message": "No matching location found."}}
    try:
        payload = json.loads(body)
    except ValueError:
        return ""
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return str(payload["error"].get("message", ""))
    return ""

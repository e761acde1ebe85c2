# -*- coding: utf-8 -*-
"""
Иерархия ошибок приложения.

Каждый класс несёт сообщение, которое показывается пользователю
в модальном уведомлении. Технические детали уходят в лог, а не в чат.
"""

from typing import Optional


class WeatherAppError(Exception):
    """Базовая ошибка погодного бота."""

    user_message = "Something went wrong. Please try again."

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail
        super().__init__(detail or self.user_message)


class InputValidationError(WeatherAppError):
    """Пустой или некорректный ввод, сеть не трогаем."""

    user_message = "Please enter a location"


class WeatherFetchError(WeatherAppError):
    """Транспортная ошибка при запросе погоды."""

    user_message = "Could not fetch weather data. Please try again."


class WeatherDecodeError(WeatherAppError):
    """Ответ API не совпал с ожидаемой JSON-структурой."""

    user_message = "Failed to get weather data."


class LocationUnavailableError(WeatherAppError):
    """Геопозиция не получена: отказ в доступе или пустой фикс."""

    user_message = "Unable to retrieve location."

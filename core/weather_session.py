# -*- coding: utf-8 -*-
"""
Сессия погодного экрана, одна на чат.

Цикл запроса: Idle → Loading → {Success → Idle, Error → Idle}.
Пока идёт загрузка, поиск и геопозиция недоступны (как отключённые кнопки).
Всё состояние меняется только внутри event loop, наружу уходят события:

- weather_loading  {"chat_id", "is_loading"}
- weather_updated  {"chat_id", "state", "new_result"}
- weather_icon     {"chat_id", "state"}
- weather_error    {"chat_id", "message"}
"""

import dataclasses
import logging
from typing import Optional, Sequence

from core.errors import InputValidationError, LocationUnavailableError, WeatherAppError
from core.event_bus import emit_event
from core.location import Coordinates, OneShotLocationFix
from core.models.display_state import DisplayState
from core.models.weather_query import WeatherQuery
from core.models.weather_response import WeatherResponse
from core.utils.api_client import WeatherApiClient
from core.utils.error_handler import log_exception
from core.utils.validator import clean_location_input

logger = logging.getLogger("weather_session")

EVENT_LOADING = "weather_loading"
EVENT_UPDATED = "weather_updated"
EVENT_ICON = "weather_icon"
EVENT_ERROR = "weather_error"


class WeatherSession:
    def __init__(self, chat_id: int, api_client: WeatherApiClient):
        self.chat_id = chat_id
        self.api_client = api_client
        self.state = DisplayState()
        self.last_response: Optional[WeatherResponse] = None
        self.location_fix = OneShotLocationFix()
        # Номер последнего показанного результата; старые иконки отбрасываются
        self._generation = 0

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    def snapshot(self) -> DisplayState:
        return dataclasses.replace(self.state)

    # === ДЕЙСТВИЯ ПОЛЬЗОВАТЕЛЯ ===
    async def search(self, text) -> bool:
        """
        Поиск по названию места.

        Returns:
            True, если погода получена и показана
        """
        if self.is_loading:
            logger.info(f"⏳ Чат {self.chat_id}: поиск во время загрузки, игнорируем")
            return False
        try:
            location = clean_location_input(text)
        except InputValidationError as e:
            await self._report(e)
            return False
        return await self._fetch(WeatherQuery.from_text(location))

    def request_location(self) -> bool:
        """Запрос одноразовой геопозиции. False, если идёт загрузка."""
        if self.is_loading:
            return False
        self.location_fix.start()
        return True

    async def use_location(self, updates: Sequence[Coordinates]) -> bool:
        """Погода по последнему из полученных обновлений позиции."""
        if self.is_loading:
            logger.info(f"⏳ Чат {self.chat_id}: геопозиция во время загрузки, игнорируем")
            return False
        if not self.location_fix.listening:
            logger.info(f"📍 Чат {self.chat_id}: позиция вне запроса, игнорируем")
            return False
        fix = self.location_fix.deliver(updates)
        if fix is None:
            await self.location_failed("Нет обновлений позиции")
            return False
        return await self._fetch(WeatherQuery.from_coordinates(fix.latitude, fix.longitude))

    async def location_failed(self, reason: Optional[str] = None) -> None:
        self.location_fix.stop()
        await self._report(LocationUnavailableError(reason))

    async def toggle_unit(self) -> bool:
        """
        Переключает °C/°F и перерисовывает температуру из последнего ответа.

        Положение переключателя меняется всегда; без данных перерисовывать нечего.
        """
        self.state.unit = self.state.unit.toggled()
        if self.last_response is None:
            logger.debug(f"Чат {self.chat_id}: единицы {self.state.unit.symbol}, данных ещё нет")
            return False
        self.state.temperature_value = self.state.unit.pick(self.last_response)
        await emit_event(EVENT_UPDATED, {
            "chat_id": self.chat_id,
            "state": self.snapshot(),
            "new_result": False
        })
        return True

    # === ЦИКЛ ЗАПРОСА ===
    async def _fetch(self, query: WeatherQuery) -> bool:
        await self._set_loading(True)
        response = None
        error = None
        try:
            response = await self.api_client.fetch_current(query)
        except WeatherAppError as e:
            error = e
        finally:
            await self._set_loading(False)

        if error is not None:
            await self._report(error)
            return False

        generation = self._apply(response)
        await emit_event(EVENT_UPDATED, {
            "chat_id": self.chat_id,
            "state": self.snapshot(),
            "new_result": True
        })
        await self._load_icon(response, generation)
        return True

    async def _set_loading(self, loading: bool) -> None:
        self.state.is_loading = loading
        await emit_event(EVENT_LOADING, {"chat_id": self.chat_id, "is_loading": loading})

    def _apply(self, response: WeatherResponse) -> int:
        self._generation += 1
        self.last_response = response
        self.state.location_name = response.location_name
        self.state.condition_text = response.condition_text
        self.state.temperature_value = self.state.unit.pick(response)
        self.state.icon = None
        return self._generation

    async def _load_icon(self, response: WeatherResponse, generation: int) -> None:
        image = await self.api_client.fetch_icon(response)
        if image is None:
            return
        if generation != self._generation:
            logger.debug(f"Чат {self.chat_id}: иконка устарела, пропускаем")
            return
        self.state.icon = image
        await emit_event(EVENT_ICON, {"chat_id": self.chat_id, "state": self.snapshot()})

    async def _report(self, error: WeatherAppError) -> None:
        log_exception(error, "Ошибка погодного запроса", context={"chat_id": self.chat_id})
        await emit_event(EVENT_ERROR, {"chat_id": self.chat_id, "message": error.user_message})

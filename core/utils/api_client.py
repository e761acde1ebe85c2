# -*- coding: utf-8 -*-
"""
Клиент weatherapi.com (текущая погода).

Поддерживает:
- Один запрос: fetch_current(WeatherQuery): название места или координаты
- Загрузку иконки состояния: fetch_icon(weather), ошибки не пробрасываются
- Разделение ошибок: транспорт (WeatherFetchError) / декодирование (WeatherDecodeError)

Ретраев и кэша нет намеренно: пользователь повторяет действие сам.
"""
import logging
from typing import Optional

import httpx

from config.bot_config import DEFAULT_WEATHERAPI_URL
from core.errors import WeatherFetchError
from core.models.weather_query import WeatherQuery
from core.models.weather_response import WeatherResponse

logger = logging.getLogger("api_client")

# === КОНФИГУРАЦИЯ API ===
API_TIMEOUT = 10.0  # секунд
ICON_SCHEME = "https:"


class WeatherApiClient:
    """Асинхронный клиент для weatherapi.com поверх httpx.AsyncClient."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_WEATHERAPI_URL,
        icon_scheme: str = ICON_SCHEME,
        timeout: float = API_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.icon_scheme = icon_scheme
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def build_params(self, query: WeatherQuery) -> dict:
        """Параметры запроса; aqi всегда выключен."""
        return {
            "key": self.api_key,
            "q": query.to_param(),
            "aqi": "no"
        }

    async def fetch_current(self, query: WeatherQuery) -> WeatherResponse:
        """
        Получает текущую погоду.

        Args:
            query: Название места или координаты

        Returns:
            WeatherResponse

        Raises:
            WeatherFetchError: сеть недоступна, таймаут и т.п.
            WeatherDecodeError: тело ответа не совпало со схемой
        """
        q = query.to_param()
        try:
            response = await self._client.get(self.base_url, params=self.build_params(query))
        except httpx.TransportError as e:
            logger.error(f"❌ weatherapi: транспортная ошибка для q='{q}': {e!r}")
            raise WeatherFetchError(str(e)) from e

        if response.is_error:
            # Тело всё равно декодируем: ошибка API уйдёт в WeatherDecodeError
            logger.warning(f"⚠️ weatherapi: HTTP {response.status_code} для q='{q}'")

        weather = WeatherResponse.from_json(response.content)
        logger.info(f"✅ weatherapi: погода получена для q='{q}' → {weather.location_name}")
        return weather

    async def fetch_icon(self, weather: WeatherResponse) -> Optional[bytes]:
        """
        Загружает иконку состояния погоды.

        Returns:
            bytes или None, если загрузить не удалось (иконка косметическая)
        """
        url = weather.icon_url(self.icon_scheme)
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"🖼️ Иконка не загружена ({url}): {e!r}")
            return None

        if not response.content:
            logger.warning(f"🖼️ Пустая иконка: {url}")
            return None
        return response.content

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

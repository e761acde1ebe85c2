# process_manager.py
# -*- coding: utf-8 -*-
"""
Глобальный координатор зависимостей.
Инициализирует все сервисы один раз и предоставляет к ним доступ.
"""

import logging
from typing import Optional

from cachetools import LRUCache

from config.bot_config import BotConfig
from config.logging_config import setup_logging
from core.utils.api_client import WeatherApiClient
from core.weather_session import WeatherSession

logger = logging.getLogger("process_manager")

# Давно молчавшие чаты вытесняются, сессия создастся заново
MAX_SESSIONS = 1000


class ProcessManager:
    """
    Единый контекст приложения. Все зависимости инициализируются здесь.
    """

    def __init__(self, max_sessions: int = MAX_SESSIONS):
        self._initialized = False
        # Конфигурация
        self.config: Optional[BotConfig] = None
        # Клиент weatherapi.com
        self.api_client: Optional[WeatherApiClient] = None
        # Сессии экранов: chat_id → WeatherSession
        self.sessions: LRUCache = LRUCache(maxsize=max_sessions)

    def initialize_sync(self, config: Optional[BotConfig] = None):
        """Синхронная инициализация всех компонентов."""
        if self._initialized:
            return

        # 1. Загрузка конфигурации
        self.config = config or BotConfig.load()

        # 2. Логирование
        setup_logging(self.config.log_level, self.config.log_dir)

        # 3. HTTP-клиент погоды
        self.api_client = WeatherApiClient(
            api_key=self.config.weather_api_key,
            base_url=self.config.weather_api_url,
            icon_scheme=self.config.icon_scheme,
            timeout=self.config.request_timeout
        )

        self._initialized = True
        logger.info("✅ ProcessManager: initialized (api_client ready)")

    def get_session(self, chat_id: int) -> WeatherSession:
        """Сессия экрана для чата; создаётся при первом обращении."""
        if not self._initialized:
            raise RuntimeError("ProcessManager is not initialized")
        session = self.sessions.get(chat_id)
        if session is None:
            session = WeatherSession(chat_id, self.api_client)
            self.sessions[chat_id] = session
            logger.debug(f"🆕 Сессия создана для чата {chat_id}")
        return session

    async def shutdown(self):
        """Асинхронное завершение (закрытие HTTP-клиента)."""
        if not self._initialized:
            return
        await self.api_client.aclose()
        self.sessions.clear()
        self._initialized = False
        logger.info("🛑 ProcessManager: shut down")

# Глобальный экземпляр, точка доступа для всех модулей
process_manager = ProcessManager()

# -*- coding: utf-8 -*-
"""
Утилита для централизованной обработки ошибок.
"""

import logging
from typing import Optional

from core.errors import WeatherAppError

logger = logging.getLogger("error_handler")


def log_exception(exception: Exception, message: str = "Необработанное исключение", context: Optional[dict] = None):
    """
    Просто логирует исключение без выбрасывания.

    Ожидаемые ошибки приложения (WeatherAppError) пишутся как warning без трейсбека,
    всё остальное как error с трейсбеком.

    Args:
        exception (Exception): Исключение
        message (str): Описание
        context (dict): Контекст (chat_id и т.п.)
    """
    log_context = f" | Контекст: {context}" if context else ""
    if isinstance(exception, WeatherAppError):
        logger.warning(f"{message}{log_context} | Ошибка: {exception!r}")
    else:
        logger.error(f"{message}{log_context} | Ошибка: {exception!r}", exc_info=exception)


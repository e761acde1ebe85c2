# -*- coding: utf-8 -*-
"""
Одноразовое получение геопозиции.

Запрос → одно или несколько обновлений → берём последнее и сразу
перестаём слушать. Повторные обновления без нового start() игнорируются.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from core.errors import LocationUnavailableError
from core.utils.validator import validate_coordinates

logger = logging.getLogger("location")


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float

    @classmethod
    def checked(cls, latitude, longitude) -> "Coordinates":
        """
        Raises:
            LocationUnavailableError: координаты отсутствуют или вне диапазона
        """
        if not validate_coordinates(latitude, longitude):
            raise LocationUnavailableError(f"Неверные координаты: lat={latitude}, lon={longitude}")
        return cls(float(latitude), float(longitude))


class OneShotLocationFix:
    def __init__(self):
        self._listening = False

    @property
    def listening(self) -> bool:
        return self._listening

    def start(self) -> None:
        self._listening = True
        logger.debug("📍 Ожидаем геопозицию")

    def stop(self) -> None:
        self._listening = False

    def deliver(self, updates: Sequence[Coordinates]) -> Optional[Coordinates]:
        """
        Принимает пачку обновлений позиции.

        Returns:
            Последнее обновление или None, если не слушаем / обновлений нет
        """
        if not self._listening:
            logger.debug("📍 Обновление позиции вне запроса, игнорируем")
            return None
        if not updates:
            return None
        self.stop()
        fix = updates[-1]
        logger.info(f"📍 Геопозиция получена: {fix.latitude}, {fix.longitude}")
        return fix

# core/utils/validator.py
from core.errors import InputValidationError


def clean_location_input(text) -> str:
    """Обрезает пробелы по краям; сам текст уходит в API как есть."""
    if not isinstance(text, str):
        raise InputValidationError("Input must be a string")
    text = text.strip()
    if not text:
        raise InputValidationError("Empty location")
    return text


def validate_coordinates(lat, lon) -> bool:
    """Проверяет, что координаты числовые и в допустимом диапазоне."""
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180

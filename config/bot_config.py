# config/bot_config.py
import os
from dataclasses import dataclass
from dotenv import load_dotenv
load_dotenv()

DEFAULT_WEATHERAPI_URL = "https://api.weatherapi.com/v1/current.json"


@dataclass
class BotConfig:
    telegram_token: str
    weather_api_key: str
    weather_api_url: str = DEFAULT_WEATHERAPI_URL
    icon_scheme: str = "https:"
    request_timeout: float = 10.0
    log_level: str = "INFO"
    log_dir: str = "logs"

    @classmethod
    def load(cls):
        return cls(
            telegram_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
            weather_api_key=os.getenv("WEATHERAPI_KEY", ""),
            weather_api_url=os.getenv("WEATHERAPI_URL", DEFAULT_WEATHERAPI_URL),
            icon_scheme=os.getenv("WEATHER_ICON_SCHEME", "https:"),
            request_timeout=float(os.getenv("WEATHER_REQUEST_TIMEOUT", "10")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_dir=os.getenv("LOG_DIR", "logs")
        )

    def missing_secrets(self) -> list:
        """Имена обязательных переменных окружения, которые не заданы."""
        missing = []
        if not self.telegram_token:
            missing.append("TELEGRAM_BOT_TOKEN")
        if not self.weather_api_key:
            missing.append("WEATHERAPI_KEY")
        return missing

"""Process-wide settings, read once from the environment (and .env) at startup."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

VERSION = "1.0.0"


@dataclass(frozen=True)
class Settings:
    openweather_api_key: str = ""
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    environment: str = "development"
    frontend_url: Optional[str] = None
    port: int = 3001
    units: str = "metric"
    lang: str = "en"
    weather_timeout: int = 10
    ai_timeout: int = 30

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise SystemExit(f"Invalid {name}: {exc}") from exc


def load_config() -> Settings:
    load_dotenv()
    settings = Settings(
        openweather_api_key=os.getenv("OPENWEATHER_API_KEY", ""),
        gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
        environment=os.getenv("SKYSENSE_ENV", "development"),
        frontend_url=os.getenv("FRONTEND_URL") or None,
        port=_int_env("PORT", 3001),
        units=os.getenv("WEATHER_UNITS", "metric"),
        lang=os.getenv("WEATHER_LANG", "en"),
        weather_timeout=_int_env("WEATHER_TIMEOUT", 10),
        ai_timeout=_int_env("AI_TIMEOUT", 30),
    )

    if not settings.openweather_api_key:
        logging.warning("OPENWEATHER_API_KEY not set; weather endpoints will report a configuration error")
    if not settings.gemini_api_key:
        logging.warning("GEMINI_API_KEY not set; chat endpoints will report a configuration error")

    logging.info(
        f"Configuration loaded: environment={settings.environment} port={settings.port} "
        f"units={settings.units} model={settings.gemini_model}"
    )
    return settings

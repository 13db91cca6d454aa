from pathlib import Path
import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Уровень логирования
    LOG_LEVEL: str = "INFO"

    # Каталог стран (JSON)
    COUNTRIES_FILE: Path = Path(__file__).resolve().parent / "backend" / "data" / "countries.json"
    # Откуда берутся картинки флагов: {FLAG_CDN_BASE}/{code}.png
    FLAG_CDN_BASE: str = "https://flagcdn.com/w320"

    # Генерация фактов о стране (Gemini REST API)
    GEMINI_API_KEY: str | None = os.environ.get("API_KEY", None)
    GEMINI_MODEL: str = "gemini-3-flash-preview"
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    FACT_TEMPERATURE: float = 0.7
    FACT_TIMEOUT: float = 15.0

    # Параметры игры по умолчанию
    N_QUESTIONS: int = 10
    DEFAULT_MODE: str = "FLAGS"

    # Настройки для бота / клиента
    # Базовый URL API (FastAPI)
    API_BASE: str = os.environ.get("API_BASE", "http://127.0.0.1:8080")
    API_TOKEN: str | None = os.environ.get("API_TOKEN", "")
    # Токен Telegram-бота (устанавливается через .env как BOT_TOKEN)
    BOT_TOKEN: str | None = ""
    # URL вебхука для Telegram (если используется). Пример: https://domain.tld/tg/webhook
    WEBHOOK_URL: str | None = os.environ.get("WEBHOOK_URL", None)

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=True,
        extra='ignore',
    )


# Создаем глобальный экземпляр настроек
settings = Settings()

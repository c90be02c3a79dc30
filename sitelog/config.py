from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database (server of record)
    DATABASE_URL: str = "sqlite+aiosqlite:///./sitelog.db"

    # Remote report repository
    REPORTS_API_URL: str = "http://localhost:5000/api"
    REPORTS_API_TIMEOUT_SECONDS: float = 10.0

    # Exporter service (PDF / Excel / ZIP rendering)
    EXPORTER_URL: str = "mock://exporter"
    EXPORTER_TIMEOUT_SECONDS: float = 60.0

    # Local drafts
    DRAFT_STORAGE_PATH: str = "./drafts"
    DRAFT_KEY_PREFIX: str = "daily-report:"
    AUTOSAVE_INTERVAL_SECONDS: float = 30.0

    # Form defaults
    DEFAULT_WEATHER: str = "Sunny"

    # App
    ALLOWED_ORIGINS: str = "*"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "FX Rates"
    environment: str = "development"
    api_prefix: str = ""

    database_url: str
    data_url: str
    cors_origins: str = "http://localhost:3000"

    base_currency: str = "USD"
    sync_interval_seconds: float = 24 * 60 * 60
    sync_on_startup: bool = True
    http_timeout_seconds: float = 15.0

    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout_seconds: float = 30.0
    db_pool_recycle_seconds: int = 1800
    db_connect_retries: int = 20

    log_level: str = "INFO"
    log_json: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()

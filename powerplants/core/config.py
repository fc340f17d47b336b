"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "powerplants"
    app_version: str = "0.1.0"
    api_prefix: str = "/api"
    host: str = "0.0.0.0"
    port: int = 8080
    database_url: str = "postgresql+psycopg://powerplants:powerplants@db:5432/powerplants"
    database_echo: bool = False
    # Open-Meteo (https://open-meteo.com/en/docs)
    open_meteo_forecast_url: str = "https://api.open-meteo.com"
    open_meteo_elevation_url: str = "https://api.open-meteo.com"
    open_meteo_timeout: float = 15.0
    # Per-request deadline shared by store and provider calls
    request_timeout_seconds: float = 30.0
    default_forecast_days: int = 7
    default_page_size: int = 10
    max_page_size: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()

__all__ = ["settings", "Settings"]

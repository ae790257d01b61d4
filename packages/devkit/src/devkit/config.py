from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from devkit.timezone import configure_utc_timezone


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    SERVICE_NAME: str = "service"
    DATABASE_URL: str | None = None
    AUTH_JWT_SECRET: str = "dev-only-secret"
    WORKER_FRESHNESS_SECONDS: int = 300
    GEOLOCATION_TIMEOUT_SECONDS: float = 10.0
    GEOCODER_BASE_URL: str = "https://nominatim.openstreetmap.org"
    GEOCODER_TIMEOUT_SECONDS: float = 5.0
    STORAGE_PUBLIC_BASE_URL: str = "http://localhost:8100/storage"
    MAX_PHOTO_COUNT: int = 3
    MAX_PHOTO_BYTES: int = 5 * 1024 * 1024
    ENFORCE_STATUS_TRANSITIONS: bool = False
    LOG_LEVEL: str = "INFO"


def load_settings(service_name: str) -> ServiceSettings:
    configure_utc_timezone()
    return ServiceSettings(SERVICE_NAME=service_name)

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseAppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "TaxLedger"
    ENV: str = "dev"
    DATABASE_URL: str | None = None
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "plain"

    # Reporting window resolution
    DAILY_BUCKET_MAX_DAYS: int = 93  # ranges up to ~one quarter chart per day
    WEEKDAY_LABEL_MAX_DAYS: int = 7
    DAYS_PER_YEAR: float = 365.25

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def normalise_log_format(cls, v):
        """Accept 'JSON' / 'Plain' from env files."""
        if v is None:
            return "plain"
        return str(v).lower()

    @model_validator(mode="after")
    def _validate_required_fields(self) -> BaseAppSettings:
        # Convert Heroku's postgres:// URL to postgresql://
        if self.DATABASE_URL and self.DATABASE_URL.startswith("postgres://"):
            self.DATABASE_URL = self.DATABASE_URL.replace("postgres://", "postgresql://", 1)

        if self.ENV.lower() == "prod" and not self.DATABASE_URL:
            raise ValueError("Missing required production settings: DATABASE_URL")
        if self.DAILY_BUCKET_MAX_DAYS < self.WEEKDAY_LABEL_MAX_DAYS:
            raise ValueError("DAILY_BUCKET_MAX_DAYS must not be smaller than WEEKDAY_LABEL_MAX_DAYS")
        return self


class DevSettings(BaseAppSettings):
    ENV: str = "dev"
    DATABASE_URL: str = "sqlite:///./storage/dev.db"


class TestSettings(BaseAppSettings):
    ENV: str = "test"
    DATABASE_URL: str = "sqlite:///:memory:"


class ProdSettings(BaseAppSettings):
    ENV: str = "prod"
    LOG_FORMAT: str = "json"


_ENV_TO_SETTINGS: dict[str, type[BaseAppSettings]] = {
    "dev": DevSettings,
    "development": DevSettings,
    "test": TestSettings,
    "testing": TestSettings,
    "prod": ProdSettings,
    "production": ProdSettings,
}


@lru_cache
def get_settings() -> BaseAppSettings:
    env_name = os.getenv("APP_ENV") or os.getenv("ENV") or "dev"
    env = env_name.lower()
    settings_cls = _ENV_TO_SETTINGS.get(env, DevSettings)
    return settings_cls()


settings = get_settings()

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True, extra="ignore")

    RELAY_ENV: str = "development"
    RELAY_MODE: str = "api"
    API_HOST: str = "127.0.0.1"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    GITHUB_WEBHOOK_SECRET: str | None = None
    SLACK_WEBHOOK_URL: str | None = None
    SLACK_TIMEOUT_SECONDS: float = 5.0
    MAX_BODY_BYTES: int = 26_214_400

    @model_validator(mode="after")
    def normalize_secrets(self) -> "Settings":
        if self.GITHUB_WEBHOOK_SECRET is not None and not self.GITHUB_WEBHOOK_SECRET.strip():
            self.GITHUB_WEBHOOK_SECRET = None
        if self.SLACK_WEBHOOK_URL is not None:
            self.SLACK_WEBHOOK_URL = self.SLACK_WEBHOOK_URL.strip() or None
        if self.SLACK_TIMEOUT_SECONDS <= 0:
            raise ValueError("SLACK_TIMEOUT_SECONDS must be positive")
        if self.MAX_BODY_BYTES <= 0:
            raise ValueError("MAX_BODY_BYTES must be positive")
        if self.RELAY_ENV.strip().lower() == "production":
            if not self.GITHUB_WEBHOOK_SECRET:
                raise ValueError("GITHUB_WEBHOOK_SECRET must be configured in production")
            if not self.SLACK_WEBHOOK_URL:
                raise ValueError("SLACK_WEBHOOK_URL must be configured in production")
        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()

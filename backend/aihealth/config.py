from functools import lru_cache
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environment
    environment: Literal["development", "staging", "production"] = "development"

    # Settings store (API key, prompt template, selected model)
    database_url: str = "sqlite:///./aihealth.db"

    # OpenAI-compatible chat completions endpoint
    openai_base_url: str = "https://api.openai.com/v1"
    openai_timeout_seconds: float = 60.0
    system_message: str = "You are a friendly health assistant."

    # Live data source: Health Auto Export JSON payload
    health_export_path: str = ""

    # Calendar arithmetic (start of day, N days back) happens in this zone
    timezone: str = "UTC"

    # Opt in to degrading a failing metric family to "absent" instead of aborting the snapshot
    isolate_fetch_failures: bool = False

    # App settings
    app_name: str = "AIHealth"

    # Logging
    log_level: str = "INFO"

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def debug(self) -> bool:
        """Debug mode is only enabled in development."""
        return self.environment == "development"

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache
def get_settings() -> Settings:
    return Settings()

"""API dependencies for dependency injection."""

from fastapi import Depends
from sqlalchemy.orm import Session

from aihealth.database import get_db
from aihealth.schemas.settings import AppSettings
from aihealth.services.openai_service import OpenAIService
from aihealth.services.settings import SettingsService
from aihealth.sources import get_health_source
from aihealth.sources.base import HealthDataSource


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    return SettingsService(db)


def get_app_settings(service: SettingsService = Depends(get_settings_service)) -> AppSettings:
    """User settings loaded once per request and passed down explicitly."""
    return service.load()


def get_source() -> HealthDataSource:
    """Live health data source; overridden in tests."""
    return get_health_source()


def get_openai_service() -> OpenAIService:
    return OpenAIService()

from aihealth.config import get_settings
from aihealth.sources.auto_export import HealthAutoExportSource
from aihealth.sources.base import (
    AuthorizationState,
    HealthDataSource,
    HealthMetric,
    Quantity,
    QuantitySample,
    SleepSample,
    SleepStage,
    WorkoutSample,
)
from aihealth.sources.memory import InMemoryHealthSource


def get_health_source() -> HealthDataSource:
    """Live data source configured by ``health_export_path``."""
    settings = get_settings()
    return HealthAutoExportSource(settings.health_export_path, tz=settings.tz)


__all__ = [
    "AuthorizationState",
    "HealthAutoExportSource",
    "HealthDataSource",
    "HealthMetric",
    "InMemoryHealthSource",
    "Quantity",
    "QuantitySample",
    "SleepSample",
    "SleepStage",
    "WorkoutSample",
    "get_health_source",
]

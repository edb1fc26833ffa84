"""Metric fetchers, one per snapshot family."""

from aihealth.services.metrics.activity import ActivityFetcher
from aihealth.services.metrics.base import MetricFetcher
from aihealth.services.metrics.body import BodyFetcher, OxygenFetcher, VO2MaxFetcher
from aihealth.services.metrics.cardio import HRVFetcher, RespirationFetcher, RestingHeartRateFetcher
from aihealth.services.metrics.sleep import SleepFetcher
from aihealth.services.metrics.workouts import WorkoutsFetcher, workout_type_name
from aihealth.sources.base import HealthDataSource

FETCHER_CLASSES: list[type[MetricFetcher]] = [
    SleepFetcher,
    HRVFetcher,
    RestingHeartRateFetcher,
    ActivityFetcher,
    WorkoutsFetcher,
    BodyFetcher,
    OxygenFetcher,
    RespirationFetcher,
    VO2MaxFetcher,
]


def build_fetchers(source: HealthDataSource) -> list[MetricFetcher]:
    return [fetcher_class(source) for fetcher_class in FETCHER_CLASSES]


__all__ = [
    "FETCHER_CLASSES",
    "ActivityFetcher",
    "BodyFetcher",
    "HRVFetcher",
    "MetricFetcher",
    "OxygenFetcher",
    "RespirationFetcher",
    "RestingHeartRateFetcher",
    "SleepFetcher",
    "VO2MaxFetcher",
    "WorkoutsFetcher",
    "build_fetchers",
    "workout_type_name",
]

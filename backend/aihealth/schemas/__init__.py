from aihealth.schemas.snapshot import (
    FAMILY_NAMES,
    ActivityMetrics,
    BodyMetrics,
    HealthFamily,
    HealthSnapshot,
    HRVMetrics,
    OxygenMetrics,
    RespirationMetrics,
    RestingHeartRateMetrics,
    SleepMetrics,
    VO2MaxMetrics,
    WorkoutDetail,
    WorkoutSummary,
)

__all__ = [
    "FAMILY_NAMES",
    "ActivityMetrics",
    "BodyMetrics",
    "HealthFamily",
    "HealthSnapshot",
    "HRVMetrics",
    "OxygenMetrics",
    "RespirationMetrics",
    "RestingHeartRateMetrics",
    "SleepMetrics",
    "VO2MaxMetrics",
    "WorkoutDetail",
    "WorkoutSummary",
]

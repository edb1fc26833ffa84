"""Health snapshot data model.

A snapshot is one immutable aggregate of nine metric families captured at
a single moment. Each family is optional and every field inside a family
is optional too; ``HealthFamily.collapse`` is the single place that turns
"no field present" into "family absent".
"""

from typing import Any, Optional, TypeVar

from pydantic import AwareDatetime, BaseModel, ConfigDict, model_validator


def to_camel(name: str) -> str:
    """snake_case field name -> camelCase JSON key (digits kept as-is)."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


FAMILY_NAMES = (
    "sleep",
    "hrv",
    "resting_heart_rate",
    "activity",
    "workouts",
    "body",
    "oxygen",
    "respiration",
    "vo2max",
)


class SnapshotModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )


FamilyT = TypeVar("FamilyT", bound="HealthFamily")


class HealthFamily(SnapshotModel):
    """Base for the per-family sub-records."""

    @classmethod
    def collapse(cls: type[FamilyT], **fields: Any) -> Optional[FamilyT]:
        """Build the record, or return None when every field is absent.

        Absent fields are left out so model defaults apply.
        """
        present = {name: value for name, value in fields.items() if value is not None}
        if not present:
            return None
        return cls(**present)


class SleepMetrics(HealthFamily):
    last_night_hours: Optional[float] = None
    average_7_days: Optional[float] = None
    bedtime: Optional[AwareDatetime] = None
    wake_up: Optional[AwareDatetime] = None


class HRVMetrics(HealthFamily):
    """Heart rate variability (SDNN) in milliseconds."""

    today: Optional[float] = None
    baseline_7_days: Optional[float] = None
    sample_count: Optional[int] = None
    sample_time: Optional[AwareDatetime] = None
    device: Optional[str] = None


class RestingHeartRateMetrics(HealthFamily):
    """Resting heart rate in beats per minute."""

    today: Optional[float] = None
    baseline_7_days: Optional[float] = None


class ActivityMetrics(HealthFamily):
    steps_today: Optional[float] = None
    steps_7_day_average: Optional[float] = None
    active_energy: Optional[float] = None  # kcal
    exercise_minutes: Optional[float] = None
    stand_hours: Optional[float] = None


class WorkoutDetail(HealthFamily):
    type: Optional[str] = None
    minutes: Optional[float] = None
    date: Optional[AwareDatetime] = None


class WorkoutSummary(HealthFamily):
    """Workout counts over nested 7/14/30-day windows.

    Counts are plain integers: zero means "looked, found none".
    """

    workouts_7_days: int = 0
    workouts_14_days: int = 0
    workouts_30_days: int = 0
    days_since_last_workout: Optional[int] = None
    last_workout: Optional[WorkoutDetail] = None

    @model_validator(mode="after")
    def check_counts(self) -> "WorkoutSummary":
        counts = (self.workouts_7_days, self.workouts_14_days, self.workouts_30_days)
        if min(counts) < 0:
            raise ValueError("workout counts cannot be negative")
        if not counts[0] <= counts[1] <= counts[2]:
            raise ValueError("workout counts must satisfy 7 days <= 14 days <= 30 days")
        return self


class BodyMetrics(HealthFamily):
    weight: Optional[float] = None  # kg
    weight_7_day_average: Optional[float] = None
    body_fat_percent: Optional[float] = None


class OxygenMetrics(HealthFamily):
    sleep_average: Optional[float] = None  # percent, 0-100


class RespirationMetrics(HealthFamily):
    sleep_rate: Optional[float] = None  # breaths per minute
    baseline_7_day: Optional[float] = None


class VO2MaxMetrics(HealthFamily):
    """Cardiorespiratory fitness in mL/(kg*min).

    Age, sex and the reference norm are never read from the data source;
    only manual entry fills them.
    """

    latest: Optional[float] = None
    previous: Optional[float] = None
    age: Optional[int] = None
    sex: Optional[str] = None
    norm: Optional[float] = None
    date: Optional[AwareDatetime] = None
    context: Optional[str] = None


class HealthSnapshot(SnapshotModel):
    captured_at: AwareDatetime
    sleep: Optional[SleepMetrics] = None
    hrv: Optional[HRVMetrics] = None
    resting_heart_rate: Optional[RestingHeartRateMetrics] = None
    activity: Optional[ActivityMetrics] = None
    workouts: Optional[WorkoutSummary] = None
    body: Optional[BodyMetrics] = None
    oxygen: Optional[OxygenMetrics] = None
    respiration: Optional[RespirationMetrics] = None
    vo2max: Optional[VO2MaxMetrics] = None

    @property
    def families_present(self) -> list[str]:
        return [name for name in FAMILY_NAMES if getattr(self, name) is not None]

    @property
    def has_any_metrics(self) -> bool:
        return bool(self.families_present)

"""Manual health form -> HealthSnapshot.

Every family goes through ``HealthFamily.collapse``, so a family whose
fields were all left blank is absent, exactly like a fetched family with
no data. Workout counts are integers, so an entered "0" counts as present;
they must be non-negative and nested (7 days <= 14 days <= 30 days).
"""

import re
from datetime import datetime
from typing import Optional

from aihealth.core.exceptions import ValidationError
from aihealth.core.windows import local_now
from aihealth.schemas.insights import ManualHealthForm
from aihealth.schemas.snapshot import (
    ActivityMetrics,
    BodyMetrics,
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

_DECIMAL = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
_INTEGER = re.compile(r"[+-]?\d+")


def parse_decimal(text: str) -> Optional[float]:
    """Parse user-typed decimal text; a comma works as the separator."""
    normalized = text.replace(",", ".").strip()
    if not _DECIMAL.fullmatch(normalized):
        return None
    return float(normalized)


def parse_int(text: str) -> Optional[int]:
    trimmed = text.strip()
    if not _INTEGER.fullmatch(trimmed):
        return None
    return int(trimmed)


def trimmed_or_none(text: str) -> Optional[str]:
    trimmed = text.strip()
    return trimmed or None


def build_workouts(form: ManualHealthForm) -> Optional[WorkoutSummary]:
    counts = {
        "workouts_7_days": parse_int(form.workouts_7_days),
        "workouts_14_days": parse_int(form.workouts_14_days),
        "workouts_30_days": parse_int(form.workouts_30_days),
        "days_since_last_workout": parse_int(form.days_since_last_workout),
    }
    if any(value is not None and value < 0 for value in counts.values()):
        raise ValidationError("form", "Workout counts and days since the last workout cannot be negative")

    # Blank counts are zero in the summary
    week, fortnight, month = (counts[f"workouts_{days}_days"] or 0 for days in (7, 14, 30))
    if not week <= fortnight <= month:
        raise ValidationError(
            "form", "Workout counts must not shrink as the window grows (7 days <= 14 days <= 30 days)"
        )

    return WorkoutSummary.collapse(
        **counts,
        last_workout=WorkoutDetail.collapse(
            type=trimmed_or_none(form.last_workout_type),
            minutes=parse_decimal(form.last_workout_minutes),
            date=form.last_workout_date,
        ),
    )


def build_families(form: ManualHealthForm) -> dict:
    return {
        "sleep": SleepMetrics.collapse(
            last_night_hours=parse_decimal(form.sleep_last_night),
            average_7_days=parse_decimal(form.sleep_average),
            bedtime=form.sleep_bedtime,
            wake_up=form.sleep_wake,
        ),
        "hrv": HRVMetrics.collapse(
            today=parse_decimal(form.hrv_today),
            baseline_7_days=parse_decimal(form.hrv_baseline),
            sample_count=parse_int(form.hrv_sample_count),
            sample_time=form.hrv_sample_time,
            device=trimmed_or_none(form.hrv_device),
        ),
        "resting_heart_rate": RestingHeartRateMetrics.collapse(
            today=parse_decimal(form.resting_hr_today),
            baseline_7_days=parse_decimal(form.resting_hr_baseline),
        ),
        "activity": ActivityMetrics.collapse(
            steps_today=parse_decimal(form.steps_today),
            steps_7_day_average=parse_decimal(form.steps_average),
            active_energy=parse_decimal(form.active_energy),
            exercise_minutes=parse_decimal(form.exercise_minutes),
            stand_hours=parse_decimal(form.stand_hours),
        ),
        "workouts": build_workouts(form),
        "body": BodyMetrics.collapse(
            weight=parse_decimal(form.weight),
            weight_7_day_average=parse_decimal(form.weight_average),
            body_fat_percent=parse_decimal(form.body_fat),
        ),
        "oxygen": OxygenMetrics.collapse(sleep_average=parse_decimal(form.oxygen_sleep_average)),
        "respiration": RespirationMetrics.collapse(
            sleep_rate=parse_decimal(form.respiration_sleep_rate),
            baseline_7_day=parse_decimal(form.respiration_baseline),
        ),
        "vo2max": VO2MaxMetrics.collapse(
            latest=parse_decimal(form.vo2_latest),
            previous=parse_decimal(form.vo2_previous),
            age=parse_int(form.vo2_age),
            sex=trimmed_or_none(form.vo2_sex),
            norm=parse_decimal(form.vo2_norm),
            date=form.vo2_date,
            context=trimmed_or_none(form.vo2_context),
        ),
    }


def has_any_metrics(form: ManualHealthForm) -> bool:
    return any(family is not None for family in build_families(form).values())


def build_snapshot(form: ManualHealthForm, now: Optional[datetime] = None) -> HealthSnapshot:
    captured_at = form.snapshot_date or now or local_now()
    return HealthSnapshot(captured_at=captured_at, **build_families(form))

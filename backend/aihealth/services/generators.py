"""Synthetic snapshots for demos and tests."""

import random
from datetime import datetime, timedelta, timezone
from typing import Optional

from aihealth.core.windows import local_now
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

MOCK_TZ = timezone(timedelta(hours=2))
MOCK_CAPTURED_AT = datetime(2025, 10, 25, 9, 42, tzinfo=MOCK_TZ)
MOCK_LAST_WORKOUT = datetime(2025, 10, 24, 18, 10, tzinfo=MOCK_TZ)

WORKOUT_TYPES = ["run", "strength", "bike", "swim", "yoga", "hiit"]
VO2_CONTEXTS = ["run", "bike", "hike", "row"]
DEVICES = ["Apple Watch", "iPhone", "Oura Ring"]


def mock_snapshot() -> HealthSnapshot:
    """A fixed, fully populated snapshot."""
    return HealthSnapshot(
        captured_at=MOCK_CAPTURED_AT,
        sleep=SleepMetrics(
            last_night_hours=7.6,
            average_7_days=7.2,
            bedtime=datetime(2025, 10, 24, 23, 45, tzinfo=MOCK_TZ),
            wake_up=datetime(2025, 10, 25, 7, 20, tzinfo=MOCK_TZ),
        ),
        hrv=HRVMetrics(
            today=61,
            baseline_7_days=54,
            sample_count=4,
            sample_time=MOCK_CAPTURED_AT,
            device="Apple Watch",
        ),
        resting_heart_rate=RestingHeartRateMetrics(today=52, baseline_7_days=54),
        activity=ActivityMetrics(
            steps_today=12_480,
            steps_7_day_average=10_950,
            active_energy=720,
            exercise_minutes=44,
            stand_hours=13,
        ),
        workouts=WorkoutSummary(
            workouts_7_days=6,
            workouts_14_days=11,
            workouts_30_days=22,
            days_since_last_workout=1,
            last_workout=WorkoutDetail(type="run", minutes=45, date=MOCK_LAST_WORKOUT),
        ),
        body=BodyMetrics(weight=78.0, weight_7_day_average=78.2, body_fat_percent=16.2),
        oxygen=OxygenMetrics(sleep_average=97),
        respiration=RespirationMetrics(sleep_rate=13.4, baseline_7_day=13.8),
        vo2max=VO2MaxMetrics(
            latest=47.8,
            previous=45.5,
            age=26,
            sex="male",
            norm=43.0,
            date=MOCK_LAST_WORKOUT,
            context="run",
        ),
    )


class RandomSnapshotGenerator:
    """Plausible random snapshots, reproducible for a given seed.

    Some families and fields are randomly left out, but a generated family
    always carries at least one value and the workout counts are nested.
    """

    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def chance(self) -> bool:
        return self.rng.random() < 0.5

    def hours_before(self, reference: datetime, low: int, high: int) -> datetime:
        return reference - timedelta(hours=self.rng.randint(low, high))

    def sleep(self, reference: datetime) -> SleepMetrics:
        return SleepMetrics(
            last_night_hours=self.rng.uniform(5.0, 9.5),
            average_7_days=self.rng.uniform(5.5, 9.0),
            bedtime=self.hours_before(reference, 7, 10) if self.chance() else None,
            wake_up=self.hours_before(reference, 0, 2) if self.chance() else None,
        )

    def hrv(self, reference: datetime) -> HRVMetrics:
        today = self.rng.uniform(35, 95)
        return HRVMetrics(
            today=today,
            baseline_7_days=today + self.rng.uniform(-8, 8),
            sample_count=self.rng.randint(2, 10) if self.chance() else None,
            sample_time=self.hours_before(reference, 1, 8) if self.chance() else None,
            device=self.rng.choice(DEVICES) if self.chance() else None,
        )

    def resting_heart_rate(self) -> RestingHeartRateMetrics:
        return RestingHeartRateMetrics(
            today=self.rng.uniform(45, 70),
            baseline_7_days=self.rng.uniform(45, 75),
        )

    def activity(self) -> ActivityMetrics:
        return ActivityMetrics(
            steps_today=self.rng.uniform(3_000, 18_000),
            steps_7_day_average=self.rng.uniform(4_000, 15_000),
            active_energy=self.rng.uniform(300, 1_000),
            exercise_minutes=self.rng.uniform(10, 90),
            stand_hours=self.rng.uniform(6, 16),
        )

    def workouts(self, reference: datetime) -> WorkoutSummary:
        workouts_7 = self.rng.randint(0, 8)
        workouts_14 = workouts_7 + self.rng.randint(0, 6)
        workouts_30 = workouts_14 + self.rng.randint(0, 10)

        # The last workout falls in the innermost window that has one
        if workouts_7:
            days_since = self.rng.randint(0, 6)
        elif workouts_14:
            days_since = self.rng.randint(7, 13)
        elif workouts_30:
            days_since = self.rng.randint(14, 29)
        else:
            days_since = None

        last_workout = None
        if days_since is not None:
            last_workout = WorkoutDetail(
                type=self.rng.choice(WORKOUT_TYPES),
                minutes=self.rng.uniform(25, 90),
                date=reference - timedelta(days=days_since),
            )

        return WorkoutSummary(
            workouts_7_days=workouts_7,
            workouts_14_days=workouts_14,
            workouts_30_days=workouts_30,
            days_since_last_workout=days_since,
            last_workout=last_workout,
        )

    def body(self) -> BodyMetrics:
        weight = self.rng.uniform(50, 110)
        return BodyMetrics(
            weight=weight,
            weight_7_day_average=weight + self.rng.uniform(-1.5, 1.5),
            body_fat_percent=self.rng.uniform(8, 30) if self.chance() else None,
        )

    def vo2max(self, reference: datetime) -> VO2MaxMetrics:
        latest = self.rng.uniform(32, 65)
        return VO2MaxMetrics(
            latest=latest,
            previous=max(28, latest + self.rng.uniform(-2.5, 2.5)),
            age=self.rng.randint(20, 65),
            sex=self.rng.choice(["male", "female"]),
            norm=self.rng.uniform(30, 55),
            date=reference - timedelta(days=self.rng.randint(1, 10)) if self.chance() else None,
            context=self.rng.choice(VO2_CONTEXTS) if self.chance() else None,
        )

    def generate(self, reference: Optional[datetime] = None) -> HealthSnapshot:
        reference = reference or local_now()
        return HealthSnapshot(
            captured_at=reference,
            sleep=self.sleep(reference),
            hrv=self.hrv(reference) if self.chance() else None,
            resting_heart_rate=self.resting_heart_rate() if self.chance() else None,
            activity=self.activity(),
            workouts=self.workouts(reference),
            body=self.body() if self.chance() else None,
            oxygen=OxygenMetrics(sleep_average=self.rng.uniform(94, 99)) if self.chance() else None,
            respiration=(
                RespirationMetrics(
                    sleep_rate=self.rng.uniform(10, 18),
                    baseline_7_day=self.rng.uniform(10, 18),
                )
                if self.chance()
                else None
            ),
            vo2max=self.vo2max(reference),
        )

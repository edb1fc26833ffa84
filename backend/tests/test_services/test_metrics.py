"""Tests for the metric fetchers."""

import asyncio
from datetime import datetime, timedelta

import pytest

from aihealth.core import units
from aihealth.core.exceptions import HealthQueryError, UnitConversionError
from aihealth.services.metrics import (
    FETCHER_CLASSES,
    ActivityFetcher,
    BodyFetcher,
    HRVFetcher,
    OxygenFetcher,
    RespirationFetcher,
    RestingHeartRateFetcher,
    SleepFetcher,
    VO2MaxFetcher,
    WorkoutsFetcher,
    workout_type_name,
)
from aihealth.sources import HealthMetric, InMemoryHealthSource, SleepSample, SleepStage, WorkoutSample


def fetch(fetcher_class, source, now):
    return asyncio.run(fetcher_class(source).fetch(now))


class TestEmptySource:
    @pytest.mark.parametrize("fetcher_class", FETCHER_CLASSES)
    def test_no_data_collapses_to_absent(self, fetcher_class, now):
        assert fetch(fetcher_class, InMemoryHealthSource(), now) is None

    def test_registry_covers_every_family(self):
        assert [fetcher.family for fetcher in FETCHER_CLASSES] == [
            "sleep",
            "hrv",
            "resting_heart_rate",
            "activity",
            "workouts",
            "body",
            "oxygen",
            "respiration",
            "vo2max",
        ]


class TestSleepFetcher:
    def last_night(self, now: datetime) -> list[SleepSample]:
        bed = now.replace(hour=0, minute=0) - timedelta(minutes=45)  # 23:15 yesterday
        asleep = bed + timedelta(minutes=15)
        return [
            SleepSample(SleepStage.IN_BED, bed, asleep),
            SleepSample(SleepStage.CORE, asleep, asleep + timedelta(hours=4)),
            SleepSample(SleepStage.DEEP, asleep + timedelta(hours=4), asleep + timedelta(hours=5.6)),
            SleepSample(SleepStage.REM, asleep + timedelta(hours=5.6), asleep + timedelta(hours=7.6)),
            SleepSample(
                SleepStage.AWAKE,
                asleep + timedelta(hours=7.6),
                asleep + timedelta(hours=7.6, minutes=14),
            ),
        ]

    def prior_week(self, now: datetime) -> list[SleepSample]:
        samples = []
        for nights_back in range(2, 9):
            start = now.replace(hour=23, minute=0) - timedelta(days=nights_back)
            samples.append(SleepSample(SleepStage.ASLEEP, start, start + timedelta(hours=7.2)))
        return samples

    def test_last_night_and_weekly_average(self, now):
        source = InMemoryHealthSource(sleep=self.last_night(now) + self.prior_week(now))

        sleep = fetch(SleepFetcher, source, now)

        assert sleep.last_night_hours == pytest.approx(7.6)
        assert sleep.average_7_days == pytest.approx(7.2)

    def test_bedtime_and_wake_cover_all_stages(self, now):
        samples = self.last_night(now)
        source = InMemoryHealthSource(sleep=samples)

        sleep = fetch(SleepFetcher, source, now)

        assert sleep.bedtime == samples[0].start
        assert sleep.wake_up == samples[-1].end
        assert sleep.average_7_days is None

    def test_awake_time_is_not_sleep(self, now):
        start = now - timedelta(hours=6)
        source = InMemoryHealthSource(sleep=[SleepSample(SleepStage.AWAKE, start, start + timedelta(hours=1))])

        sleep = fetch(SleepFetcher, source, now)

        assert sleep.last_night_hours is None
        assert sleep.bedtime == start

    def test_split_night_sums_per_day(self, now):
        # Two asleep blocks on the same prior day count as one night
        day = now.replace(hour=13, minute=0) - timedelta(days=3)
        source = InMemoryHealthSource(
            sleep=[
                SleepSample(SleepStage.ASLEEP, day, day + timedelta(hours=1)),
                SleepSample(SleepStage.ASLEEP, day + timedelta(hours=9), day + timedelta(hours=15)),
            ]
        )

        sleep = fetch(SleepFetcher, source, now)

        assert sleep.average_7_days == pytest.approx(7.0)


class TestBaselineFetchers:
    def test_hrv_today_baseline_and_device(self, now, make_sample):
        samples = [
            make_sample(HealthMetric.HEART_RATE_VARIABILITY, value, "ms", now - timedelta(days=days))
            for days, value in [(6, 50.0), (4, 52.0), (2, 56.0)]
        ]
        latest = make_sample(
            HealthMetric.HEART_RATE_VARIABILITY,
            0.061,
            "s",
            now - timedelta(hours=3),
            device="Apple Watch",
        )
        source = InMemoryHealthSource(samples=samples + [latest])

        hrv = fetch(HRVFetcher, source, now)

        assert hrv.today == pytest.approx(61.0)
        assert hrv.baseline_7_days == pytest.approx((50 + 52 + 56 + 61) / 4)
        assert hrv.sample_count == 4
        assert hrv.sample_time == latest.start
        assert hrv.device == "Apple Watch"

    def test_hrv_empty_window_has_no_baseline(self, now, make_sample):
        old = make_sample(HealthMetric.HEART_RATE_VARIABILITY, 48.0, "ms", now - timedelta(days=10))
        source = InMemoryHealthSource(samples=[old])

        hrv = fetch(HRVFetcher, source, now)

        assert hrv.today == 48.0
        assert hrv.baseline_7_days is None
        assert hrv.sample_count is None

    def test_resting_heart_rate(self, now, make_sample):
        source = InMemoryHealthSource(
            samples=[
                make_sample(HealthMetric.RESTING_HEART_RATE, 56, "count/min", now - timedelta(days=3)),
                make_sample(HealthMetric.RESTING_HEART_RATE, 52, "count/min", now - timedelta(hours=8)),
            ]
        )

        resting = fetch(RestingHeartRateFetcher, source, now)

        assert resting.today == 52
        assert resting.baseline_7_days == pytest.approx(54)

    def test_respiration(self, now, make_sample):
        source = InMemoryHealthSource(
            samples=[
                make_sample(HealthMetric.RESPIRATORY_RATE, 14.2, "breaths/min", now - timedelta(days=2)),
                make_sample(HealthMetric.RESPIRATORY_RATE, 13.4, "breaths/min", now - timedelta(hours=5)),
            ]
        )

        respiration = fetch(RespirationFetcher, source, now)

        assert respiration.sleep_rate == pytest.approx(13.4)
        assert respiration.baseline_7_day == pytest.approx(13.8)


class TestActivityFetcher:
    def test_sums_since_midnight(self, now, make_sample):
        midnight = now.replace(hour=0, minute=0)
        source = InMemoryHealthSource(
            samples=[
                make_sample(HealthMetric.STEP_COUNT, 5000, "count", midnight + timedelta(hours=7)),
                make_sample(HealthMetric.STEP_COUNT, 7480, "count", midnight + timedelta(hours=9)),
                make_sample(HealthMetric.STEP_COUNT, 9000, "count", midnight - timedelta(hours=2)),
                make_sample(HealthMetric.ACTIVE_ENERGY, 720, "kcal", midnight + timedelta(hours=8)),
                make_sample(HealthMetric.EXERCISE_TIME, 44, "min", midnight + timedelta(hours=8)),
                make_sample(HealthMetric.STAND_TIME, 780, "min", midnight + timedelta(hours=9)),
            ]
        )

        activity = fetch(ActivityFetcher, source, now)

        assert activity.steps_today == 12480
        assert activity.active_energy == 720
        assert activity.exercise_minutes == 44
        assert activity.stand_hours == pytest.approx(13)

    def test_step_average_over_days_with_data(self, now, make_sample):
        midnight = now.replace(hour=0, minute=0)
        source = InMemoryHealthSource(
            samples=[
                make_sample(HealthMetric.STEP_COUNT, 10000, "count", midnight - timedelta(days=3, hours=-12)),
                make_sample(HealthMetric.STEP_COUNT, 12000, "count", midnight - timedelta(days=2, hours=-12)),
                make_sample(HealthMetric.STEP_COUNT, 2000, "count", midnight - timedelta(days=2, hours=-13)),
            ]
        )

        activity = fetch(ActivityFetcher, source, now)

        assert activity.steps_7_day_average == pytest.approx(12000)
        assert activity.steps_today is None

    def test_missing_signal_does_not_block_others(self, now, make_sample):
        source = InMemoryHealthSource(
            samples=[make_sample(HealthMetric.ACTIVE_ENERGY, 300, "kcal", now - timedelta(hours=1))]
        )

        activity = fetch(ActivityFetcher, source, now)

        assert activity.active_energy == 300
        assert activity.steps_today is None
        assert activity.stand_hours is None


class TestWorkoutsFetcher:
    def workout(self, now, days, activity_type="Traditional Strength Training", minutes=30):
        start = now - timedelta(days=days, hours=1)
        return WorkoutSample(activity_type, start, start + timedelta(minutes=minutes), minutes * 60)

    def test_nested_window_counts(self, now):
        last_start = now.replace(hour=17, minute=25) - timedelta(days=1)
        last = WorkoutSample("Running", last_start, last_start + timedelta(minutes=45), 45 * 60)
        workouts = [last]
        workouts += [self.workout(now, days) for days in range(2, 7)]
        workouts += [self.workout(now, days) for days in range(8, 13)]
        workouts += [self.workout(now, days) for days in range(15, 26)]
        workouts.append(self.workout(now, 40))
        source = InMemoryHealthSource(workouts=workouts)

        summary = fetch(WorkoutsFetcher, source, now)

        assert summary.workouts_7_days == 6
        assert summary.workouts_14_days == 11
        assert summary.workouts_30_days == 22
        assert summary.days_since_last_workout == 1
        assert summary.last_workout.type == "run"
        assert summary.last_workout.minutes == 45
        assert summary.last_workout.date == last.end

    def test_old_workouts_only(self, now):
        source = InMemoryHealthSource(workouts=[self.workout(now, 20, "Yoga")])

        summary = fetch(WorkoutsFetcher, source, now)

        assert (summary.workouts_7_days, summary.workouts_14_days, summary.workouts_30_days) == (0, 0, 1)
        assert summary.days_since_last_workout == 20
        assert summary.last_workout.type == "yoga"

    def test_duration_falls_back_to_interval(self, now):
        start = now - timedelta(hours=3)
        source = InMemoryHealthSource(workouts=[WorkoutSample("Cycling", start, start + timedelta(minutes=50))])

        summary = fetch(WorkoutsFetcher, source, now)

        assert summary.last_workout.minutes == pytest.approx(50)
        assert summary.last_workout.type == "bike"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Running", "run"),
            ("HKWorkoutActivityTypeRunning", "run"),
            ("Traditional Strength Training", "strength"),
            ("functional_strength_training", "strength"),
            ("Outdoor Cycle", "bike"),
            ("Pool Swim", "swim"),
            ("High Intensity Interval Training", "hiit"),
            ("Rowing", "Rowing"),
        ],
    )
    def test_type_vocabulary(self, raw, expected):
        assert workout_type_name(raw) == expected


class TestBodyAndOxygen:
    def test_weight_average_and_body_fat(self, now, make_sample):
        source = InMemoryHealthSource(
            samples=[
                make_sample(HealthMetric.BODY_MASS, 78.4, "kg", now - timedelta(days=5)),
                make_sample(HealthMetric.BODY_MASS, 78000, "g", now - timedelta(hours=2)),
                make_sample(HealthMetric.BODY_FAT_PERCENTAGE, 0.162, "fraction", now - timedelta(days=20)),
            ]
        )

        body = fetch(BodyFetcher, source, now)

        assert body.weight == pytest.approx(78.0)
        assert body.weight_7_day_average == pytest.approx(78.2)
        assert body.body_fat_percent == pytest.approx(16.2)

    def test_body_fat_alone_is_enough(self, now, make_sample):
        source = InMemoryHealthSource(
            samples=[make_sample(HealthMetric.BODY_FAT_PERCENTAGE, 18.0, "%", now - timedelta(days=1))]
        )

        body = fetch(BodyFetcher, source, now)

        assert body.weight is None
        assert body.body_fat_percent == 18.0

    def test_oxygen_weekly_average(self, now, make_sample):
        source = InMemoryHealthSource(
            samples=[
                make_sample(HealthMetric.OXYGEN_SATURATION, 96, "%", now - timedelta(days=1)),
                make_sample(HealthMetric.OXYGEN_SATURATION, 98, "%", now - timedelta(days=2)),
                make_sample(HealthMetric.OXYGEN_SATURATION, 90, "%", now - timedelta(days=9)),
            ]
        )

        oxygen = fetch(OxygenFetcher, source, now)

        assert oxygen.sleep_average == pytest.approx(97)


class TestVO2MaxFetcher:
    def test_latest_previous_and_context(self, now, make_sample):
        latest = make_sample(
            HealthMetric.VO2_MAX,
            47.8,
            "mL/(kg*min)",
            now - timedelta(days=1),
            metadata={"HKWorkoutBrandName": "run"},
        )
        source = InMemoryHealthSource(
            samples=[
                make_sample(HealthMetric.VO2_MAX, 45.5, "ml/kg/min", now - timedelta(days=12)),
                make_sample(HealthMetric.VO2_MAX, 40.0, "ml/kg/min", now - timedelta(days=45)),
                latest,
            ]
        )

        vo2 = fetch(VO2MaxFetcher, source, now)

        assert vo2.latest == 47.8
        assert vo2.previous == 45.5
        assert vo2.date == latest.end
        assert vo2.context == "run"
        assert vo2.age is None
        assert vo2.sex is None
        assert vo2.norm is None

    def test_single_estimate_has_no_previous(self, now, make_sample):
        source = InMemoryHealthSource(
            samples=[make_sample(HealthMetric.VO2_MAX, 44.0, units.VO2_MAX, now - timedelta(days=3))]
        )

        vo2 = fetch(VO2MaxFetcher, source, now)

        assert vo2.latest == 44.0
        assert vo2.previous is None
        assert vo2.context is None


class TestFetchErrors:
    def test_unknown_unit_propagates(self, now, make_sample):
        source = InMemoryHealthSource(
            samples=[make_sample(HealthMetric.BODY_MASS, 1, "furlong", now - timedelta(hours=1))]
        )

        with pytest.raises(UnitConversionError):
            fetch(BodyFetcher, source, now)

    def test_transport_failure_is_wrapped(self, now, mocker):
        source = InMemoryHealthSource()
        mocker.patch.object(source, "query_samples", side_effect=ConnectionError("socket closed"))

        with pytest.raises(HealthQueryError) as exc_info:
            fetch(OxygenFetcher, source, now)
        assert exc_info.value.details["metric"] == "oxygen"

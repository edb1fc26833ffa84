"""
Health Auto Export data source.

Reads the JSON payload produced by the Health Auto Export iOS app
(``{"data": {"metrics": [...], "workouts": [...], "sleepAnalysis": [...]}}``)
and serves it through the in-memory query engine.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional
from zoneinfo import ZoneInfo

from aihealth.config import get_settings
from aihealth.sources.base import HealthMetric, QuantitySample, SleepSample, SleepStage, WorkoutSample
from aihealth.sources.memory import InMemoryHealthSource

# Export metric names (snake_case and camelCase variants) -> metric
METRIC_NAME_MAP = {
    "step_count": HealthMetric.STEP_COUNT,
    "stepCount": HealthMetric.STEP_COUNT,
    "active_energy": HealthMetric.ACTIVE_ENERGY,
    "active_energy_burned": HealthMetric.ACTIVE_ENERGY,
    "activeEnergyBurned": HealthMetric.ACTIVE_ENERGY,
    "apple_exercise_time": HealthMetric.EXERCISE_TIME,
    "appleExerciseTime": HealthMetric.EXERCISE_TIME,
    "apple_stand_time": HealthMetric.STAND_TIME,
    "appleStandTime": HealthMetric.STAND_TIME,
    "heart_rate_variability": HealthMetric.HEART_RATE_VARIABILITY,
    "heartRateVariability": HealthMetric.HEART_RATE_VARIABILITY,
    "heart_rate_variability_sdnn": HealthMetric.HEART_RATE_VARIABILITY,
    "resting_heart_rate": HealthMetric.RESTING_HEART_RATE,
    "restingHeartRate": HealthMetric.RESTING_HEART_RATE,
    "respiratory_rate": HealthMetric.RESPIRATORY_RATE,
    "respiratoryRate": HealthMetric.RESPIRATORY_RATE,
    "oxygen_saturation": HealthMetric.OXYGEN_SATURATION,
    "oxygenSaturation": HealthMetric.OXYGEN_SATURATION,
    "blood_oxygen_saturation": HealthMetric.OXYGEN_SATURATION,
    "body_mass": HealthMetric.BODY_MASS,
    "bodyMass": HealthMetric.BODY_MASS,
    "weight_body_mass": HealthMetric.BODY_MASS,
    "weightBodyMass": HealthMetric.BODY_MASS,
    "body_fat_percentage": HealthMetric.BODY_FAT_PERCENTAGE,
    "bodyFatPercentage": HealthMetric.BODY_FAT_PERCENTAGE,
    "vo2_max": HealthMetric.VO2_MAX,
    "vo2Max": HealthMetric.VO2_MAX,
}

# Units used when an export omits them
DEFAULT_UNITS = {
    HealthMetric.STEP_COUNT: "count",
    HealthMetric.ACTIVE_ENERGY: "kcal",
    HealthMetric.EXERCISE_TIME: "min",
    HealthMetric.STAND_TIME: "min",
    HealthMetric.HEART_RATE_VARIABILITY: "ms",
    HealthMetric.RESTING_HEART_RATE: "count/min",
    HealthMetric.RESPIRATORY_RATE: "count/min",
    HealthMetric.OXYGEN_SATURATION: "%",
    HealthMetric.BODY_MASS: "kg",
    HealthMetric.BODY_FAT_PERCENTAGE: "%",
    HealthMetric.VO2_MAX: "mL/(kg*min)",
}

SLEEP_STAGE_MAP = {
    "inBed": SleepStage.IN_BED,
    "in_bed": SleepStage.IN_BED,
    "asleep": SleepStage.ASLEEP,
    "asleepUnspecified": SleepStage.ASLEEP,
    "asleepCore": SleepStage.CORE,
    "core": SleepStage.CORE,
    "asleepDeep": SleepStage.DEEP,
    "deep": SleepStage.DEEP,
    "asleepREM": SleepStage.REM,
    "rem": SleepStage.REM,
    "awake": SleepStage.AWAKE,
}

DATE_FORMATS = [
    "%Y-%m-%d %H:%M:%S %z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
]


def _records(container: dict[str, Any], key: str) -> list[dict[str, Any]]:
    """The object entries of ``container[key]``; a non-list gives none."""
    items = container.get(key)
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


class HealthAutoExportSource(InMemoryHealthSource):
    """Data source loaded lazily from a Health Auto Export JSON file.

    The file is read on the first availability check; a missing or
    malformed file makes the source unavailable.
    """

    name = "health_auto_export"

    def __init__(self, path: str, tz: Optional[ZoneInfo] = None):
        super().__init__()
        self.path = Path(path) if path else None
        self.tz = tz or get_settings().tz
        self._loaded = False

    async def is_available(self) -> bool:
        if self._loaded:
            return True
        if self.path is None:
            self._logger.warning("health_export_not_configured")
            return False
        try:
            self.load_payload(json.loads(self.path.read_text(encoding="utf-8")))
        except (OSError, ValueError) as e:
            self._logger.warning("health_export_unreadable", path=str(self.path), error=str(e))
            return False
        return True

    @classmethod
    def from_payload(cls, payload: dict[str, Any], tz: Optional[ZoneInfo] = None) -> "HealthAutoExportSource":
        source = cls("", tz=tz)
        source.load_payload(payload)
        return source

    def load_payload(self, payload: Any) -> None:
        """Replace the held samples with the content of an export payload.

        Raises ValueError when the payload or its ``data`` is not a JSON
        object. Entries that are not objects are skipped.
        """
        if not isinstance(payload, dict):
            raise ValueError("export payload is not a JSON object")
        data = payload.get("data", payload)
        if not isinstance(data, dict):
            raise ValueError("export data is not a JSON object")

        self.samples = []
        for metric in _records(data, "metrics"):
            self.samples.extend(self._parse_metric(metric))

        self.workouts = [
            workout
            for workout in (self._parse_workout(item) for item in _records(data, "workouts"))
            if workout is not None
        ]
        self.sleep = [
            sample
            for sample in (self._parse_sleep(item) for item in _records(data, "sleepAnalysis"))
            if sample is not None
        ]
        self._loaded = True

        self._logger.info(
            "health_export_loaded",
            samples=len(self.samples),
            workouts=len(self.workouts),
            sleep=len(self.sleep),
        )

    def _parse_metric(self, metric: dict[str, Any]) -> list[QuantitySample]:
        name = metric.get("name")
        health_metric = METRIC_NAME_MAP.get(name) if isinstance(name, str) else None
        if health_metric is None:
            return []

        units = metric.get("units")
        if not isinstance(units, str) or not units:
            units = DEFAULT_UNITS[health_metric]
        samples = []
        for item in _records(metric, "data"):
            start = self._parse_date(item.get("date", item.get("startDate")))
            if start is None:
                continue
            end = self._parse_date(item.get("endDate")) or start

            value = item.get("qty", item.get("value", item.get("avg")))
            try:
                value = float(value)
            except (ValueError, TypeError):
                continue
            metadata = item.get("metadata")

            samples.append(
                QuantitySample(
                    metric=health_metric,
                    value=value,
                    unit=units,
                    start=start,
                    end=end,
                    device=item.get("device", item.get("deviceName")),
                    metadata=metadata if isinstance(metadata, dict) else {},
                )
            )
        return samples

    def _parse_workout(self, workout: dict[str, Any]) -> Optional[WorkoutSample]:
        start = self._parse_date(workout.get("start", workout.get("startDate")))
        end = self._parse_date(workout.get("end", workout.get("endDate")))
        if start is None or end is None:
            return None

        duration = workout.get("duration")
        try:
            duration = float(duration) if duration is not None else None
        except (ValueError, TypeError):
            duration = None
        activity_type = workout.get("name", workout.get("workoutActivityType"))

        return WorkoutSample(
            activity_type=activity_type if isinstance(activity_type, str) else "Unknown",
            start=start,
            end=end,
            duration_seconds=duration,
        )

    def _parse_sleep(self, sleep: dict[str, Any]) -> Optional[SleepSample]:
        start = self._parse_date(sleep.get("startDate", sleep.get("start")))
        end = self._parse_date(sleep.get("endDate", sleep.get("end")))
        if start is None or end is None:
            return None

        raw_stage = sleep.get("value", sleep.get("sleepValue", "asleep"))
        stage = SLEEP_STAGE_MAP.get(raw_stage) if isinstance(raw_stage, str) else None
        if stage is None:
            self._logger.debug("health_sleep_stage_unknown", stage=raw_stage)
            return None
        return SleepSample(stage=stage, start=start, end=end)

    def _parse_date(self, date_str: Any) -> Optional[datetime]:
        """Parse the export's date formats into an aware datetime."""
        if not date_str or not isinstance(date_str, str):
            return None

        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(date_str, fmt)
            except ValueError:
                continue
            if fmt.endswith("Z"):
                return parsed.replace(tzinfo=timezone.utc)
            if parsed.tzinfo is None:
                return parsed.replace(tzinfo=self.tz)
            return parsed

        self._logger.warning("health_date_parse_failed", date_str=date_str)
        return None

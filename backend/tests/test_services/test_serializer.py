"""Tests for snapshot JSON encoding."""

import json
from datetime import datetime, timedelta, timezone

import pydantic
import pytest

from aihealth.schemas.snapshot import HealthSnapshot, SleepMetrics, WorkoutSummary
from aihealth.services.generators import mock_snapshot
from aihealth.services.serializer import deserialize_snapshot, serialize_snapshot, snapshot_to_dict

TZ = timezone(timedelta(hours=2))


class TestSerializeSnapshot:
    def test_round_trip_preserves_every_field(self):
        snapshot = mock_snapshot()

        restored = deserialize_snapshot(serialize_snapshot(snapshot))

        assert restored == snapshot
        assert snapshot_to_dict(restored) == snapshot_to_dict(snapshot)

    def test_absent_fields_are_omitted(self):
        snapshot = HealthSnapshot(
            captured_at=datetime(2025, 10, 25, 9, 42, tzinfo=TZ),
            sleep=SleepMetrics(last_night_hours=7.6),
        )

        data = json.loads(serialize_snapshot(snapshot))

        assert data == {"capturedAt": "2025-10-25T09:42:00+02:00", "sleep": {"lastNightHours": 7.6}}
        assert "null" not in serialize_snapshot(snapshot)

    def test_round_trip_adds_nothing(self):
        snapshot = HealthSnapshot(
            captured_at=datetime(2025, 10, 25, 9, 42, tzinfo=TZ),
            workouts=WorkoutSummary(workouts_30_days=3),
        )

        restored = deserialize_snapshot(serialize_snapshot(snapshot))

        assert restored.families_present == ["workouts"]
        assert restored.workouts.last_workout is None
        assert restored.workouts.days_since_last_workout is None

    def test_keys_sorted_and_camel_case(self):
        text = serialize_snapshot(mock_snapshot())
        data = json.loads(text)

        assert list(data) == sorted(data)
        assert list(data["activity"]) == sorted(data["activity"])
        assert data["sleep"]["average7Days"] == 7.2
        assert data["restingHeartRate"]["baseline7Days"] == 54
        assert data["workouts"]["lastWorkout"]["date"] == "2025-10-24T18:10:00+02:00"
        assert data["vo2max"]["latest"] == 47.8

    def test_pretty_printed_by_default(self):
        text = serialize_snapshot(mock_snapshot())
        assert text.startswith("{\n  ")

    def test_compact_output(self):
        snapshot = HealthSnapshot(captured_at=datetime(2025, 10, 25, 9, 42, tzinfo=TZ))
        assert serialize_snapshot(snapshot, indent=None) == '{"capturedAt":"2025-10-25T09:42:00+02:00"}'

    def test_encoding_error_falls_back_to_empty_object(self, mocker):
        mocker.patch(
            "aihealth.services.serializer.snapshot_to_dict",
            return_value={"capturedAt": object()},
        )
        assert serialize_snapshot(mock_snapshot()) == "{}"

    def test_deserialize_rejects_non_nested_workout_counts(self):
        text = json.dumps(
            {
                "capturedAt": "2025-10-25T09:42:00+02:00",
                "workouts": {"workouts7Days": 10, "workouts14Days": 2, "workouts30Days": 3},
            }
        )

        with pytest.raises(pydantic.ValidationError):
            deserialize_snapshot(text)
        with pytest.raises(pydantic.ValidationError):
            WorkoutSummary(workouts_30_days=-3)

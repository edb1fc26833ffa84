"""Tests for the mock and random snapshot generators."""

from datetime import datetime, timedelta, timezone

import pytest

from aihealth.schemas.snapshot import FAMILY_NAMES
from aihealth.services.generators import MOCK_CAPTURED_AT, RandomSnapshotGenerator, mock_snapshot
from aihealth.services.serializer import snapshot_to_dict

REFERENCE = datetime(2025, 10, 25, 9, 42, tzinfo=timezone(timedelta(hours=2)))


class TestMockSnapshot:
    def test_every_family_present(self):
        snapshot = mock_snapshot()
        assert snapshot.captured_at == MOCK_CAPTURED_AT
        assert snapshot.families_present == list(FAMILY_NAMES)

    def test_known_values(self):
        snapshot = mock_snapshot()
        assert snapshot.sleep.last_night_hours == 7.6
        assert snapshot.workouts.workouts_14_days == 11
        assert snapshot.vo2max.norm == 43.0


class TestRandomSnapshotGenerator:
    def test_same_seed_same_snapshot(self):
        first = RandomSnapshotGenerator(seed=42).generate(REFERENCE)
        second = RandomSnapshotGenerator(seed=42).generate(REFERENCE)
        assert first == second

    def test_different_seeds_differ(self):
        first = RandomSnapshotGenerator(seed=1).generate(REFERENCE)
        second = RandomSnapshotGenerator(seed=2).generate(REFERENCE)
        assert first != second

    @pytest.mark.parametrize("seed", range(50))
    def test_invariants(self, seed):
        snapshot = RandomSnapshotGenerator(seed).generate(REFERENCE)
        data = snapshot_to_dict(snapshot)

        assert snapshot.captured_at == REFERENCE
        for name in snapshot.families_present:
            family = getattr(snapshot, name)
            assert family.model_dump(exclude_none=True), name

        workouts = snapshot.workouts
        assert 0 <= workouts.workouts_7_days <= workouts.workouts_14_days <= workouts.workouts_30_days
        if workouts.last_workout is not None:
            assert workouts.last_workout.date <= REFERENCE
        assert "None" not in str(data)

    @pytest.mark.parametrize("seed", range(200))
    def test_last_workout_sits_in_innermost_non_empty_window(self, seed):
        workouts = RandomSnapshotGenerator(seed).workouts(REFERENCE)
        days_since = workouts.days_since_last_workout

        if workouts.workouts_30_days == 0:
            assert days_since is None
            assert workouts.last_workout is None
            return

        assert workouts.last_workout.date == REFERENCE - timedelta(days=days_since)
        if workouts.workouts_7_days:
            assert 0 <= days_since < 7
        elif workouts.workouts_14_days:
            assert 7 <= days_since < 14
        else:
            assert 14 <= days_since < 30

"""Workouts: nested 7/14/30-day counts and the most recent session."""

import re
from datetime import datetime
from typing import Any

from aihealth.core.windows import calendar_days_between, days_ago
from aihealth.schemas.snapshot import WorkoutDetail, WorkoutSummary
from aihealth.services.metrics.base import MetricFetcher

WINDOW_DAYS = 30

# Normalised activity name -> short label sent to the model
WORKOUT_TYPE_NAMES = {
    "running": "run",
    "run": "run",
    "outdoorrun": "run",
    "indoorrun": "run",
    "walking": "walk",
    "walk": "walk",
    "outdoorwalk": "walk",
    "indoorwalk": "walk",
    "cycling": "bike",
    "outdoorcycle": "bike",
    "outdoorcycling": "bike",
    "indoorcycle": "bike",
    "indoorcycling": "bike",
    "yoga": "yoga",
    "traditionalstrengthtraining": "strength",
    "functionalstrengthtraining": "strength",
    "highintensityintervaltraining": "hiit",
    "hiit": "hiit",
    "swimming": "swim",
    "poolswim": "swim",
    "openwaterswim": "swim",
}

_ACTIVITY_PREFIX = "hkworkoutactivitytype"


def workout_type_name(activity_type: str) -> str:
    """Short label for an activity type, or the raw name when unmapped."""
    key = re.sub(r"[^a-z0-9]", "", activity_type.lower())
    if key.startswith(_ACTIVITY_PREFIX):
        key = key[len(_ACTIVITY_PREFIX):]
    return WORKOUT_TYPE_NAMES.get(key, activity_type.strip())


class WorkoutsFetcher(MetricFetcher):
    """
    One query over the trailing 30 days; the 7- and 14-day counts are
    filters over the same result, so the counts are always nested.
    """

    family = "workouts"
    record_type = WorkoutSummary

    async def read(self, now: datetime) -> dict[str, Any]:
        workouts = await self.source.query_workouts(days_ago(now, WINDOW_DAYS), now)
        if not workouts:
            # Nothing in the window at all: the family is absent
            return {}

        workouts = sorted(workouts, key=lambda workout: workout.end, reverse=True)
        seven_days_ago = days_ago(now, 7)
        fourteen_days_ago = days_ago(now, 14)

        last = workouts[0]
        return {
            "workouts_7_days": sum(1 for workout in workouts if workout.start >= seven_days_ago),
            "workouts_14_days": sum(1 for workout in workouts if workout.start >= fourteen_days_ago),
            "workouts_30_days": len(workouts),
            "days_since_last_workout": calendar_days_between(last.end, now),
            "last_workout": WorkoutDetail.collapse(
                type=workout_type_name(last.activity_type),
                minutes=last.duration / 60,
                date=last.end,
            ),
        }

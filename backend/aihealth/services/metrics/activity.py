"""Activity: today's cumulative sums plus the weekly daily-average step count."""

import asyncio
from datetime import datetime
from typing import Any, Optional

from aihealth.core import units
from aihealth.core.windows import days_ago, start_of_day
from aihealth.schemas.snapshot import ActivityMetrics
from aihealth.services.metrics.base import MetricFetcher, mean, quantity_value
from aihealth.sources.base import HealthMetric

STEP_AVERAGE_DAYS = 7


class ActivityFetcher(MetricFetcher):
    """
    Each signal is its own query. A source that lacks one signal returns
    None for it and the others are unaffected.
    """

    family = "activity"
    record_type = ActivityMetrics

    async def read(self, now: datetime) -> dict[str, Any]:
        today = start_of_day(now)

        steps, energy, exercise, stand, steps_average = await asyncio.gather(
            self._sum_since(HealthMetric.STEP_COUNT, today, now, units.COUNT),
            self._sum_since(HealthMetric.ACTIVE_ENERGY, today, now, units.KILOCALORIES),
            self._sum_since(HealthMetric.EXERCISE_TIME, today, now, units.MINUTES),
            self._sum_since(HealthMetric.STAND_TIME, today, now, units.HOURS),
            self._daily_average(HealthMetric.STEP_COUNT, days_ago(today, STEP_AVERAGE_DAYS), now),
        )

        return {
            "steps_today": steps,
            "steps_7_day_average": steps_average,
            "active_energy": energy,
            "exercise_minutes": exercise,
            "stand_hours": stand,
        }

    async def _sum_since(
        self, metric: HealthMetric, start: datetime, end: datetime, unit: str
    ) -> Optional[float]:
        return quantity_value(await self.source.cumulative_sum(metric, start, end), unit)

    async def _daily_average(
        self, metric: HealthMetric, start: datetime, end: datetime
    ) -> Optional[float]:
        """Mean of the per-day sums, counting only days that have data."""
        daily = await self.source.daily_sums(metric, start, end)
        return mean(quantity_value(quantity, units.COUNT) for quantity in daily)

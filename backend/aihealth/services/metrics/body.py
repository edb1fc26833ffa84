"""Body composition, blood oxygen and cardiorespiratory fitness."""

import asyncio
from datetime import datetime
from typing import Any

from aihealth.core import units
from aihealth.core.windows import days_ago
from aihealth.schemas.snapshot import BodyMetrics, OxygenMetrics, VO2MaxMetrics
from aihealth.services.metrics.base import MetricFetcher, mean, sample_value, sample_values
from aihealth.sources.base import HealthMetric

AVERAGE_DAYS = 7
VO2_WINDOW_DAYS = 30

# Sample metadata keys that describe how a VO2max estimate was taken
VO2_CONTEXT_KEYS = ("HKWorkoutBrandName", "context", "workout")


class BodyFetcher(MetricFetcher):
    family = "body"
    record_type = BodyMetrics

    async def read(self, now: datetime) -> dict[str, Any]:
        latest_weight, weights, latest_fat = await asyncio.gather(
            self.source.latest_sample(HealthMetric.BODY_MASS, now),
            self.source.query_samples(HealthMetric.BODY_MASS, days_ago(now, AVERAGE_DAYS), now),
            self.source.latest_sample(HealthMetric.BODY_FAT_PERCENTAGE, now),
        )
        return {
            "weight": sample_value(latest_weight, units.KILOGRAMS),
            "weight_7_day_average": mean(sample_values(weights, units.KILOGRAMS)),
            "body_fat_percent": sample_value(latest_fat, units.PERCENT),
        }


class OxygenFetcher(MetricFetcher):
    """Weekly average only; single nightly readings are too noisy."""

    family = "oxygen"
    record_type = OxygenMetrics

    async def read(self, now: datetime) -> dict[str, Any]:
        samples = await self.source.query_samples(
            HealthMetric.OXYGEN_SATURATION, days_ago(now, AVERAGE_DAYS), now
        )
        return {"sleep_average": mean(sample_values(samples, units.PERCENT))}


class VO2MaxFetcher(MetricFetcher):
    """Latest and previous estimate from the last 30 days.

    Age, sex and the reference norm are not part of the data source.
    """

    family = "vo2max"
    record_type = VO2MaxMetrics

    async def read(self, now: datetime) -> dict[str, Any]:
        samples = await self.source.query_samples(
            HealthMetric.VO2_MAX, days_ago(now, VO2_WINDOW_DAYS), now, newest_first=True
        )
        if not samples:
            return {}

        latest = samples[0]
        previous = samples[1] if len(samples) > 1 else None
        context = next(
            (str(latest.metadata[key]) for key in VO2_CONTEXT_KEYS if latest.metadata.get(key)),
            None,
        )
        return {
            "latest": sample_value(latest, units.VO2_MAX),
            "previous": sample_value(previous, units.VO2_MAX),
            "date": latest.end,
            "context": context,
        }

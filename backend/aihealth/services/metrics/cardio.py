"""Latest-value-plus-baseline families: HRV, resting heart rate, respiration."""

import asyncio
from datetime import datetime
from typing import Any, Optional

from aihealth.core import units
from aihealth.core.windows import days_ago
from aihealth.schemas.snapshot import HRVMetrics, RespirationMetrics, RestingHeartRateMetrics
from aihealth.services.metrics.base import MetricFetcher, mean, sample_value, sample_values
from aihealth.sources.base import HealthMetric, QuantitySample

BASELINE_DAYS = 7


class BaselineFetcher(MetricFetcher):
    """Most recent sample as "today", trailing-week mean as the baseline.

    The mean is taken over each sample's value in the family's own unit.
    """

    metric: HealthMetric
    unit: str

    async def latest_and_window(
        self, now: datetime
    ) -> tuple[Optional[QuantitySample], list[QuantitySample]]:
        return await asyncio.gather(
            self.source.latest_sample(self.metric, now),
            self.source.query_samples(self.metric, days_ago(now, BASELINE_DAYS), now),
        )


class HRVFetcher(BaselineFetcher):
    family = "hrv"
    record_type = HRVMetrics
    metric = HealthMetric.HEART_RATE_VARIABILITY
    unit = units.MILLISECONDS

    async def read(self, now: datetime) -> dict[str, Any]:
        latest, window = await self.latest_and_window(now)
        return {
            "today": sample_value(latest, self.unit),
            "baseline_7_days": mean(sample_values(window, self.unit)),
            "sample_count": len(window) or None,
            "sample_time": latest.start if latest else None,
            "device": latest.device if latest else None,
        }


class RestingHeartRateFetcher(BaselineFetcher):
    family = "resting_heart_rate"
    record_type = RestingHeartRateMetrics
    metric = HealthMetric.RESTING_HEART_RATE
    unit = units.BPM

    async def read(self, now: datetime) -> dict[str, Any]:
        latest, window = await self.latest_and_window(now)
        return {
            "today": sample_value(latest, self.unit),
            "baseline_7_days": mean(sample_values(window, self.unit)),
        }


class RespirationFetcher(BaselineFetcher):
    family = "respiration"
    record_type = RespirationMetrics
    metric = HealthMetric.RESPIRATORY_RATE
    unit = units.BPM

    async def read(self, now: datetime) -> dict[str, Any]:
        latest, window = await self.latest_and_window(now)
        return {
            "sleep_rate": sample_value(latest, self.unit),
            "baseline_7_day": mean(sample_values(window, self.unit)),
        }

"""Sleep: last night's asleep time, the prior week's nightly average, bed and wake times."""

from collections import defaultdict
from datetime import date, datetime
from typing import Any

from aihealth.core.windows import day_key, days_ago, start_of_day
from aihealth.schemas.snapshot import SleepMetrics
from aihealth.services.metrics.base import MetricFetcher, mean

SECONDS_PER_HOUR = 3600.0

# Nights averaged before last night
AVERAGE_NIGHTS = 7


class SleepFetcher(MetricFetcher):
    """
    Last night covers every sample starting on or after yesterday's
    midnight. The average covers the seven calendar days before that,
    one asleep total per day that has any asleep time.
    """

    family = "sleep"
    record_type = SleepMetrics

    async def read(self, now: datetime) -> dict[str, Any]:
        today = start_of_day(now)
        last_night_start = days_ago(today, 1)
        week_start = days_ago(last_night_start, AVERAGE_NIGHTS)

        samples = await self.source.query_sleep(week_start, now)

        last_night = [sample for sample in samples if sample.start >= last_night_start]
        asleep_last_night = [sample for sample in last_night if sample.is_asleep]

        nightly_seconds: dict[date, float] = defaultdict(float)
        for sample in samples:
            if sample.is_asleep and sample.start < last_night_start:
                nightly_seconds[day_key(sample.start, now.tzinfo)] += sample.seconds

        last_night_hours = None
        if asleep_last_night:
            last_night_hours = sum(sample.seconds for sample in asleep_last_night) / SECONDS_PER_HOUR

        return {
            "last_night_hours": last_night_hours,
            "average_7_days": mean(total / SECONDS_PER_HOUR for total in nightly_seconds.values()),
            "bedtime": min((sample.start for sample in last_night), default=None),
            "wake_up": max((sample.end for sample in last_night), default=None),
        }

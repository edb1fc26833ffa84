"""Health data source backed by samples held in memory."""

from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from aihealth.core.units import convert
from aihealth.sources.base import (
    HealthDataSource,
    HealthMetric,
    Quantity,
    QuantitySample,
    SleepSample,
    WorkoutSample,
)


def _in_range(moment: datetime, start: Optional[datetime], end: Optional[datetime]) -> bool:
    if start is not None and moment < start:
        return False
    if end is not None and moment > end:
        return False
    return True


class InMemoryHealthSource(HealthDataSource):
    """Answers queries from lists of samples.

    Ranges use strict-start semantics: a sample matches when its start
    lies inside the range, whatever its end.
    """

    name = "memory"

    def __init__(
        self,
        samples: Iterable[QuantitySample] = (),
        sleep: Iterable[SleepSample] = (),
        workouts: Iterable[WorkoutSample] = (),
        available: bool = True,
        grant_access: bool = True,
    ):
        super().__init__()
        self.samples: list[QuantitySample] = list(samples)
        self.sleep: list[SleepSample] = list(sleep)
        self.workouts: list[WorkoutSample] = list(workouts)
        self._available = available
        self._grant_access = grant_access

    async def is_available(self) -> bool:
        return self._available

    async def authorize(self) -> bool:
        return self._grant_access

    async def query_samples(
        self,
        metric: HealthMetric,
        start: Optional[datetime],
        end: Optional[datetime],
        *,
        newest_first: bool = False,
        limit: Optional[int] = None,
    ) -> list[QuantitySample]:
        matches = [
            sample
            for sample in self.samples
            if sample.metric == metric and _in_range(sample.start, start, end)
        ]
        matches.sort(key=lambda sample: sample.start, reverse=newest_first)
        if limit is not None:
            matches = matches[:limit]
        return matches

    async def query_sleep(self, start: datetime, end: datetime) -> list[SleepSample]:
        matches = [sample for sample in self.sleep if _in_range(sample.start, start, end)]
        return sorted(matches, key=lambda sample: sample.start)

    async def query_workouts(self, start: datetime, end: datetime) -> list[WorkoutSample]:
        matches = [workout for workout in self.workouts if _in_range(workout.start, start, end)]
        return sorted(matches, key=lambda workout: workout.start)

    async def cumulative_sum(
        self, metric: HealthMetric, start: datetime, end: datetime
    ) -> Optional[Quantity]:
        # Half-open so adjacent daily windows never count a sample twice
        samples = [
            sample
            for sample in self.samples
            if sample.metric == metric and start <= sample.start < end
        ]
        if not samples:
            return None
        unit = samples[0].unit
        total = sum(convert(sample.value, sample.unit, unit) for sample in samples)
        return Quantity(value=total, unit=unit)

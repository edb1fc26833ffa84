"""Health data source interface.

A data source answers two kinds of question over a time range: "which
samples exist" and "what is the cumulative sum". Everything else the
metric fetchers need is derived from those.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from aihealth.core.logging import get_logger
from aihealth.core.windows import day_range

logger = get_logger(__name__)


class AuthorizationState(str, Enum):
    NOT_DETERMINED = "not_determined"
    AUTHORIZED = "authorized"
    DENIED = "denied"


class HealthMetric(str, Enum):
    """Quantity types the fetchers read."""

    STEP_COUNT = "step_count"
    ACTIVE_ENERGY = "active_energy"
    EXERCISE_TIME = "exercise_time"
    STAND_TIME = "stand_time"
    HEART_RATE_VARIABILITY = "heart_rate_variability"
    RESTING_HEART_RATE = "resting_heart_rate"
    RESPIRATORY_RATE = "respiratory_rate"
    OXYGEN_SATURATION = "oxygen_saturation"
    BODY_MASS = "body_mass"
    BODY_FAT_PERCENTAGE = "body_fat_percentage"
    VO2_MAX = "vo2_max"


class SleepStage(str, Enum):
    IN_BED = "in_bed"
    ASLEEP = "asleep"
    CORE = "core"
    DEEP = "deep"
    REM = "rem"
    AWAKE = "awake"


ASLEEP_STAGES = frozenset({SleepStage.ASLEEP, SleepStage.CORE, SleepStage.DEEP, SleepStage.REM})


@dataclass(frozen=True)
class Quantity:
    value: float
    unit: str


@dataclass(frozen=True)
class QuantitySample:
    metric: HealthMetric
    value: float
    unit: str
    start: datetime
    end: datetime
    device: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class SleepSample:
    stage: SleepStage
    start: datetime
    end: datetime

    @property
    def is_asleep(self) -> bool:
        return self.stage in ASLEEP_STAGES

    @property
    def seconds(self) -> float:
        return (self.end - self.start).total_seconds()


@dataclass(frozen=True)
class WorkoutSample:
    activity_type: str
    start: datetime
    end: datetime
    duration_seconds: Optional[float] = None

    @property
    def duration(self) -> float:
        """Recorded duration in seconds, falling back to end - start."""
        if self.duration_seconds is not None:
            return self.duration_seconds
        return (self.end - self.start).total_seconds()


class HealthDataSource(ABC):
    """Abstract base class for health data sources.

    Query methods raise ``HealthQueryError`` on transport failures and
    return empty results (or None) when there is simply no data.
    """

    name: str = ""  # Override in subclass

    def __init__(self):
        self.authorization_state = AuthorizationState.NOT_DETERMINED
        self._logger = logger.bind(source=self.name)

    @abstractmethod
    async def is_available(self) -> bool:
        """Whether the source can be read at all on this host."""

    async def authorize(self) -> bool:
        """Ask for read access. Sources without an access model grant it."""
        return True

    async def request_authorization(self) -> AuthorizationState:
        """Resolve the authorization state once per attempt.

        The state is published with a single assignment after the attempt
        completes; later calls return the settled state.
        """
        if self.authorization_state is not AuthorizationState.NOT_DETERMINED:
            return self.authorization_state

        if not await self.is_available():
            granted = False
        else:
            granted = await self.authorize()

        self.authorization_state = (
            AuthorizationState.AUTHORIZED if granted else AuthorizationState.DENIED
        )
        self._logger.info("health_authorization_resolved", state=self.authorization_state.value)
        return self.authorization_state

    def reset_authorization(self) -> None:
        self.authorization_state = AuthorizationState.NOT_DETERMINED

    @abstractmethod
    async def query_samples(
        self,
        metric: HealthMetric,
        start: Optional[datetime],
        end: Optional[datetime],
        *,
        newest_first: bool = False,
        limit: Optional[int] = None,
    ) -> list[QuantitySample]:
        """Samples of ``metric`` whose start lies in [start, end].

        A None bound leaves that side of the range open.
        """

    @abstractmethod
    async def query_sleep(self, start: datetime, end: datetime) -> list[SleepSample]:
        """Sleep analysis samples starting in [start, end]."""

    @abstractmethod
    async def query_workouts(self, start: datetime, end: datetime) -> list[WorkoutSample]:
        """Workouts starting in [start, end]."""

    @abstractmethod
    async def cumulative_sum(
        self, metric: HealthMetric, start: datetime, end: datetime
    ) -> Optional[Quantity]:
        """Sum of ``metric`` over [start, end), or None without samples."""

    async def latest_sample(
        self, metric: HealthMetric, end: Optional[datetime] = None
    ) -> Optional[QuantitySample]:
        """Most recent sample of ``metric`` regardless of age."""
        samples = await self.query_samples(metric, None, end, newest_first=True, limit=1)
        return samples[0] if samples else None

    async def daily_sums(
        self, metric: HealthMetric, start: datetime, end: datetime
    ) -> list[Quantity]:
        """Per-calendar-day cumulative sums, skipping days without data."""
        sums = await asyncio.gather(
            *(self.cumulative_sum(metric, day_start, day_end) for day_start, day_end in day_range(start, end))
        )
        return [quantity for quantity in sums if quantity is not None]

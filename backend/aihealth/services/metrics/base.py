"""Shared pieces of the metric fetchers."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from statistics import fmean
from typing import Any, Optional

from aihealth.core.exceptions import AIHealthException, HealthQueryError
from aihealth.core.logging import get_logger
from aihealth.core.units import convert
from aihealth.schemas.snapshot import HealthFamily
from aihealth.sources.base import HealthDataSource, Quantity, QuantitySample

logger = get_logger(__name__)


def mean(values: Iterable[float]) -> Optional[float]:
    """Arithmetic mean, or None for an empty window (never zero)."""
    values = list(values)
    if not values:
        return None
    return fmean(values)


def sample_value(sample: Optional[QuantitySample], unit: str) -> Optional[float]:
    if sample is None:
        return None
    return convert(sample.value, sample.unit, unit)


def sample_values(samples: Iterable[QuantitySample], unit: str) -> list[float]:
    return [convert(sample.value, sample.unit, unit) for sample in samples]


def quantity_value(quantity: Optional[Quantity], unit: str) -> Optional[float]:
    if quantity is None:
        return None
    return convert(quantity.value, quantity.unit, unit)


class MetricFetcher(ABC):
    """Reads one metric family from a data source.

    ``read`` returns the family's raw fields, any of which may be None.
    ``fetch`` turns them into the family record through the shared
    collapse rule, so "no data" comes back as None rather than as a
    record of nulls.
    """

    family: str = ""  # Snapshot field this fetcher fills
    record_type: type[HealthFamily] = HealthFamily

    def __init__(self, source: HealthDataSource):
        self.source = source
        self._logger = logger.bind(family=self.family)

    @abstractmethod
    async def read(self, now: datetime) -> dict[str, Any]:
        """Query the source and reduce samples to the family's fields."""

    async def fetch(self, now: datetime) -> Optional[HealthFamily]:
        try:
            fields = await self.read(now)
        except AIHealthException:
            raise
        except Exception as e:
            raise HealthQueryError(self.family, str(e)) from e

        record = self.record_type.collapse(**fields)
        self._logger.debug("metric_family_fetched", present=record is not None)
        return record

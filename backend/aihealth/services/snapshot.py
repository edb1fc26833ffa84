"""Snapshot assembly: run every metric fetcher for one reference time."""

import asyncio
from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from aihealth.config import get_settings
from aihealth.core.exceptions import HealthAuthorizationError, HealthDataUnavailableError
from aihealth.core.logging import get_logger
from aihealth.core.windows import local_now
from aihealth.schemas.snapshot import HealthSnapshot
from aihealth.services.metrics import MetricFetcher, build_fetchers
from aihealth.sources.base import AuthorizationState, HealthDataSource

logger = get_logger(__name__)


class SnapshotAssembler:
    """Builds a HealthSnapshot from a data source.

    All fetchers run concurrently and are joined by one gather. With
    ``isolate_failures`` a failing family is logged and left absent;
    without it (the default) the first failure aborts the whole snapshot
    and cancels the fetches still running. An unavailable
    or unauthorized source always aborts before any fetch runs.
    """

    def __init__(
        self,
        source: HealthDataSource,
        fetchers: Optional[Sequence[MetricFetcher]] = None,
        isolate_failures: Optional[bool] = None,
    ):
        self.source = source
        self.fetchers = list(fetchers) if fetchers is not None else build_fetchers(source)
        if isolate_failures is None:
            isolate_failures = get_settings().isolate_fetch_failures
        self.isolate_failures = isolate_failures

    async def ensure_access(self) -> None:
        if not await self.source.is_available():
            raise HealthDataUnavailableError()

        state = await self.source.request_authorization()
        if state is not AuthorizationState.AUTHORIZED:
            raise HealthAuthorizationError()

    async def assemble(self, now: Optional[datetime] = None) -> HealthSnapshot:
        await self.ensure_access()
        now = now or local_now()

        results = await self._run_fetchers(now)

        families = {}
        for fetcher, result in zip(self.fetchers, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "metric_fetch_failed",
                    family=fetcher.family,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                result = None
            families[fetcher.family] = result

        snapshot = HealthSnapshot(captured_at=now, **families)
        logger.info(
            "snapshot_assembled",
            source=self.source.name,
            families_present=len(snapshot.families_present),
        )
        return snapshot

    async def _run_fetchers(self, now: datetime) -> list:
        tasks = [asyncio.create_task(fetcher.fetch(now)) for fetcher in self.fetchers]
        if self.isolate_failures:
            return await asyncio.gather(*tasks, return_exceptions=True)

        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            # No fetch outlives a failed snapshot
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

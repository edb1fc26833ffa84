"""The "check health" flow: validate, build a snapshot, prompt the model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from aihealth.core.exceptions import EmptyManualEntryError, MissingAPIKeyError, ValidationError
from aihealth.core.logging import get_logger
from aihealth.schemas.insights import InsightRequest, SnapshotMode
from aihealth.schemas.settings import AppSettings
from aihealth.schemas.snapshot import HealthSnapshot
from aihealth.services import manual_entry
from aihealth.services.generators import RandomSnapshotGenerator, mock_snapshot
from aihealth.services.openai_service import ChatResult, OpenAIService
from aihealth.services.prompt import PromptBuilder, estimate_tokens
from aihealth.services.serializer import snapshot_to_dict
from aihealth.services.snapshot import SnapshotAssembler
from aihealth.sources.base import HealthDataSource

logger = get_logger(__name__)


@dataclass
class PromptPreview:
    snapshot: HealthSnapshot
    prompt: str
    estimated_prompt_tokens: int
    estimated_cost: float
    model: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "snapshot": snapshot_to_dict(self.snapshot),
            "families_present": self.snapshot.families_present,
            "prompt": self.prompt,
            "estimated_prompt_tokens": self.estimated_prompt_tokens,
            "estimated_cost": self.estimated_cost,
            "model": self.model,
        }


@dataclass
class InsightResult:
    preview: PromptPreview
    response: ChatResult

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.preview.to_dict(),
            "message": self.response.message,
            "usage": self.response.usage.to_dict() if self.response.usage else None,
        }


class HealthInsightService:
    """Runs one health check with explicitly passed settings."""

    def __init__(
        self,
        app_settings: AppSettings,
        source: Optional[HealthDataSource] = None,
        openai_service: Optional[OpenAIService] = None,
    ):
        self.app_settings = app_settings
        self.source = source
        self.openai_service = openai_service or OpenAIService()

    def validate(self, request: InsightRequest) -> None:
        """Reject a request before any data source or network access."""
        if not self.app_settings.api_key.strip():
            raise MissingAPIKeyError()
        self.validate_snapshot_request(request)

    def validate_snapshot_request(self, request: InsightRequest) -> None:
        if request.mode is SnapshotMode.MANUAL:
            if request.form is None or not manual_entry.has_any_metrics(request.form):
                raise EmptyManualEntryError()
        if request.mode is SnapshotMode.LIVE and self.source is None:
            raise ValidationError("mode", "No health data source configured")

    async def build_snapshot(
        self, request: InsightRequest, now: Optional[datetime] = None
    ) -> HealthSnapshot:
        if request.mode is SnapshotMode.MANUAL:
            return manual_entry.build_snapshot(request.form, now)
        if request.mode is SnapshotMode.MOCK:
            return mock_snapshot()
        if request.mode is SnapshotMode.RANDOM:
            return RandomSnapshotGenerator(request.seed).generate(now)
        return await SnapshotAssembler(self.source).assemble(now)

    async def preview(
        self, request: InsightRequest, now: Optional[datetime] = None
    ) -> PromptPreview:
        """Snapshot and prompt with a cost estimate, without calling the model."""
        self.validate_snapshot_request(request)
        snapshot = await self.build_snapshot(request, now)
        prompt = PromptBuilder(self.app_settings.prompt_template).prompt(snapshot)
        tokens = estimate_tokens(prompt)
        model = self.app_settings.selected_model

        logger.info(
            "health_prompt_built",
            mode=request.mode.value,
            families_present=len(snapshot.families_present),
            estimated_prompt_tokens=tokens,
        )
        return PromptPreview(
            snapshot=snapshot,
            prompt=prompt,
            estimated_prompt_tokens=tokens,
            estimated_cost=model.cost(tokens),
            model=model.id,
        )

    async def check(self, request: InsightRequest, now: Optional[datetime] = None) -> InsightResult:
        self.validate(request)
        preview = await self.preview(request, now)
        response = await self.openai_service.send_prompt(
            preview.prompt, self.app_settings.api_key, preview.model
        )
        return InsightResult(preview=preview, response=response)

"""Health check-in API routes."""

from fastapi import APIRouter, Depends

from aihealth.api.deps import get_app_settings, get_openai_service, get_source
from aihealth.schemas.insights import InsightRequest, InsightResponse, SnapshotPreviewResponse
from aihealth.schemas.settings import AppSettings
from aihealth.services.insights import HealthInsightService
from aihealth.services.openai_service import OpenAIService
from aihealth.sources.base import HealthDataSource

router = APIRouter()


@router.post("/snapshot", response_model=SnapshotPreviewResponse)
async def preview_snapshot(
    request: InsightRequest,
    app_settings: AppSettings = Depends(get_app_settings),
    source: HealthDataSource = Depends(get_source),
):
    """Build the snapshot and prompt without calling the model."""
    service = HealthInsightService(app_settings, source=source)
    preview = await service.preview(request)
    return preview.to_dict()


@router.post("/check", response_model=InsightResponse)
async def check_health(
    request: InsightRequest,
    app_settings: AppSettings = Depends(get_app_settings),
    source: HealthDataSource = Depends(get_source),
    openai_service: OpenAIService = Depends(get_openai_service),
):
    """Build the snapshot, send the prompt and return the model's answer."""
    service = HealthInsightService(app_settings, source=source, openai_service=openai_service)
    result = await service.check(request)
    return result.to_dict()

"""Settings API routes."""

from fastapi import APIRouter, Depends

from aihealth.api.deps import get_settings_service
from aihealth.schemas.settings import AppSettingsResponse, AppSettingsUpdate
from aihealth.services.settings import SettingsService

router = APIRouter()


@router.get("", response_model=AppSettingsResponse, response_model_by_alias=True)
async def read_settings(service: SettingsService = Depends(get_settings_service)):
    """Current settings; the API key is reported only as set or not."""
    return AppSettingsResponse.from_settings(service.load())


@router.put("", response_model=AppSettingsResponse, response_model_by_alias=True)
async def update_settings(
    request: AppSettingsUpdate,
    service: SettingsService = Depends(get_settings_service),
):
    """Update any of apiKey, promptTemplate and selectedModelID."""
    return AppSettingsResponse.from_settings(service.update(request))


@router.post("/reset-template", response_model=AppSettingsResponse, response_model_by_alias=True)
async def reset_template(service: SettingsService = Depends(get_settings_service)):
    """Restore the built-in prompt template."""
    return AppSettingsResponse.from_settings(service.reset_prompt_template())

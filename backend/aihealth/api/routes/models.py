"""Model catalog API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from aihealth.api.deps import get_app_settings
from aihealth.core.exceptions import NotFoundError
from aihealth.schemas.insights import ModelInfo
from aihealth.schemas.settings import AppSettings
from aihealth.services.model_catalog import MODEL_CATALOG, ChatModel, find_model

router = APIRouter()


def model_info(model: ChatModel, prompt_tokens: Optional[int], selected_id: str) -> ModelInfo:
    return ModelInfo(
        **model.to_dict(),
        estimated_cost=model.cost(prompt_tokens) if prompt_tokens is not None else None,
        selected=model.id == selected_id,
    )


@router.get("", response_model=list[ModelInfo])
async def list_models(
    prompt_tokens: Optional[int] = Query(default=None, ge=0),
    app_settings: AppSettings = Depends(get_app_settings),
):
    """All catalog models, with the cost of one request when ``prompt_tokens`` is given."""
    return [
        model_info(model, prompt_tokens, app_settings.selected_model_id)
        for model in MODEL_CATALOG
    ]


@router.get("/{model_id}", response_model=ModelInfo)
async def get_model(
    model_id: str,
    prompt_tokens: Optional[int] = Query(default=None, ge=0),
    app_settings: AppSettings = Depends(get_app_settings),
):
    model = find_model(model_id)
    if model is None:
        raise NotFoundError("Model", model_id)
    return model_info(model, prompt_tokens, app_settings.selected_model_id)

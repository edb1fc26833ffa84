"""User-editable app settings passed explicitly to the prompt and model code."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from aihealth.services.model_catalog import DEFAULT_MODEL_ID, ChatModel, get_model
from aihealth.services.prompt import DEFAULT_TEMPLATE

# Keys in the settings store
API_KEY = "apiKey"
PROMPT_TEMPLATE = "promptTemplate"
SELECTED_MODEL_ID = "selectedModelID"

SETTING_KEYS = (API_KEY, PROMPT_TEMPLATE, SELECTED_MODEL_ID)


class AppSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(default="", alias=API_KEY)
    prompt_template: str = Field(default=DEFAULT_TEMPLATE, alias=PROMPT_TEMPLATE)
    selected_model_id: str = Field(default=DEFAULT_MODEL_ID, alias=SELECTED_MODEL_ID)

    @property
    def selected_model(self) -> ChatModel:
        return get_model(self.selected_model_id)

    def to_store(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)


class AppSettingsResponse(BaseModel):
    """Settings as returned by the API; the key itself is never echoed."""

    model_config = ConfigDict(populate_by_name=True)

    api_key_set: bool = Field(alias="apiKeySet")
    prompt_template: str = Field(alias=PROMPT_TEMPLATE)
    selected_model_id: str = Field(alias=SELECTED_MODEL_ID)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "AppSettingsResponse":
        return cls(
            api_key_set=bool(settings.api_key),
            prompt_template=settings.prompt_template,
            selected_model_id=settings.selected_model_id,
        )


class AppSettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: Optional[str] = Field(default=None, alias=API_KEY)
    prompt_template: Optional[str] = Field(default=None, alias=PROMPT_TEMPLATE)
    selected_model_id: Optional[str] = Field(default=None, alias=SELECTED_MODEL_ID)

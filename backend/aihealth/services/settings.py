"""Settings service for the user's API key, prompt template and model."""
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from aihealth.core.exceptions import NotFoundError
from aihealth.core.logging import get_logger
from aihealth.models import UserSetting
from aihealth.schemas.settings import (
    API_KEY,
    PROMPT_TEMPLATE,
    SELECTED_MODEL_ID,
    AppSettings,
    AppSettingsUpdate,
)
from aihealth.services.model_catalog import DEFAULT_MODEL_ID, find_model
from aihealth.services.prompt import DEFAULT_TEMPLATE

logger = get_logger(__name__)


class SettingsService:
    """Service for managing user settings."""

    def __init__(self, db: Session):
        self.db = db

    def _upsert(self, key: str, value: str) -> UserSetting:
        setting = self.db.query(UserSetting).filter(UserSetting.key == key).first()
        if setting:
            setting.value = value
            setting.updated_at = datetime.utcnow()
        else:
            setting = UserSetting(key=key, value=value)
            self.db.add(setting)
        return setting

    def get_setting(self, key: str) -> Optional[str]:
        """Get a single setting value."""
        setting = self.db.query(UserSetting).filter(UserSetting.key == key).first()
        return setting.value if setting else None

    def set_setting(self, key: str, value: str) -> UserSetting:
        """Set a single setting value (upsert)."""
        setting = self._upsert(key, value)
        self.db.commit()
        self.db.refresh(setting)
        return setting

    def get_all_settings(self) -> dict[str, str]:
        """Get all settings as key-value dict."""
        settings_list = self.db.query(UserSetting).all()
        return {s.key: s.value for s in settings_list}

    def set_multiple_settings(self, settings_dict: dict[str, str]) -> None:
        """Set multiple settings at once."""
        for key, value in settings_dict.items():
            self._upsert(key, value)
        self.db.commit()

    def load(self) -> AppSettings:
        """
        Read the app settings, filling defaults for anything not stored.

        A stored model id that is no longer in the catalog falls back to
        the first catalog model.
        """
        stored = self.get_all_settings()
        model_id = stored.get(SELECTED_MODEL_ID) or DEFAULT_MODEL_ID
        if find_model(model_id) is None:
            logger.warning("unknown_model_id", model_id=model_id, fallback=DEFAULT_MODEL_ID)
            model_id = DEFAULT_MODEL_ID

        return AppSettings(
            api_key=stored.get(API_KEY, ""),
            prompt_template=stored.get(PROMPT_TEMPLATE, DEFAULT_TEMPLATE),
            selected_model_id=model_id,
        )

    def save(self, app_settings: AppSettings) -> None:
        self.set_multiple_settings(app_settings.to_store())
        logger.info("app_settings_saved", model_id=app_settings.selected_model_id)

    def update(self, changes: AppSettingsUpdate) -> AppSettings:
        """Apply a partial update and return the resulting settings."""
        if changes.selected_model_id is not None and find_model(changes.selected_model_id) is None:
            raise NotFoundError("Model", changes.selected_model_id)

        current = self.load()
        updated = current.model_copy(update=changes.model_dump(exclude_none=True))
        self.save(updated)
        return updated

    def reset_prompt_template(self) -> AppSettings:
        self.set_setting(PROMPT_TEMPLATE, DEFAULT_TEMPLATE)
        return self.load()

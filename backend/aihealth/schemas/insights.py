"""Request and response bodies of the insights API."""

from enum import Enum
from typing import Any, Optional

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field

from aihealth.schemas.snapshot import to_camel


class SnapshotMode(str, Enum):
    LIVE = "live"
    MANUAL = "manual"
    MOCK = "mock"
    RANDOM = "random"


class ManualHealthForm(BaseModel):
    """Manual entry: every value is free text, blank means "not entered".

    Timestamps are optional and only included when given.
    """

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    snapshot_date: Optional[AwareDatetime] = None

    sleep_last_night: str = ""
    sleep_average: str = ""
    sleep_bedtime: Optional[AwareDatetime] = None
    sleep_wake: Optional[AwareDatetime] = None

    hrv_today: str = ""
    hrv_baseline: str = ""
    hrv_sample_count: str = ""
    hrv_sample_time: Optional[AwareDatetime] = None
    hrv_device: str = ""

    resting_hr_today: str = ""
    resting_hr_baseline: str = ""

    steps_today: str = ""
    steps_average: str = ""
    active_energy: str = ""
    exercise_minutes: str = ""
    stand_hours: str = ""

    workouts_7_days: str = ""
    workouts_14_days: str = ""
    workouts_30_days: str = ""
    days_since_last_workout: str = ""
    last_workout_type: str = ""
    last_workout_minutes: str = ""
    last_workout_date: Optional[AwareDatetime] = None

    weight: str = ""
    weight_average: str = ""
    body_fat: str = ""

    oxygen_sleep_average: str = ""

    respiration_sleep_rate: str = ""
    respiration_baseline: str = ""

    vo2_latest: str = ""
    vo2_previous: str = ""
    vo2_age: str = ""
    vo2_sex: str = ""
    vo2_norm: str = ""
    vo2_date: Optional[AwareDatetime] = None
    vo2_context: str = ""


class InsightRequest(BaseModel):
    mode: SnapshotMode = SnapshotMode.LIVE
    form: Optional[ManualHealthForm] = None
    seed: Optional[int] = None


class SnapshotPreviewResponse(BaseModel):
    snapshot: dict[str, Any]
    families_present: list[str]
    prompt: str
    estimated_prompt_tokens: int
    estimated_cost: float
    model: str


class InsightResponse(SnapshotPreviewResponse):
    message: str
    usage: Optional[dict[str, int]] = None


class ModelInfo(BaseModel):
    id: str
    display_name: str
    context_window: int
    input_per_1k: float
    output_per_1k: float
    description: str
    estimated_cost: Optional[float] = Field(default=None, description="USD for one request")
    selected: bool = False

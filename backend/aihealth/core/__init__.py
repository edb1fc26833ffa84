from aihealth.core.exceptions import (
    AIHealthException,
    EmptyManualEntryError,
    EmptyModelResponseError,
    ExternalServiceError,
    HealthAuthorizationError,
    HealthDataUnavailableError,
    HealthQueryError,
    InvalidModelResponseError,
    MissingAPIKeyError,
    NotFoundError,
    OpenAIServiceError,
    UnitConversionError,
    ValidationError,
)

__all__ = [
    "AIHealthException",
    "EmptyManualEntryError",
    "EmptyModelResponseError",
    "ExternalServiceError",
    "HealthAuthorizationError",
    "HealthDataUnavailableError",
    "HealthQueryError",
    "InvalidModelResponseError",
    "MissingAPIKeyError",
    "NotFoundError",
    "OpenAIServiceError",
    "UnitConversionError",
    "ValidationError",
]

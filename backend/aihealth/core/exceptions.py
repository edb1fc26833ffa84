"""Custom exception classes for AIHealth."""

from typing import Any, Optional


class AIHealthException(Exception):
    """Base exception for AIHealth."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class NotFoundError(AIHealthException):
    """Resource not found error."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            code="NOT_FOUND",
            status_code=404,
            details={"resource": resource, "identifier": str(identifier)},
        )


class ValidationError(AIHealthException):
    """Input validation error."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=422,
            details={"field": field},
        )


class MissingAPIKeyError(ValidationError):
    """No API key configured for the model endpoint."""

    def __init__(self):
        super().__init__(field="apiKey", message="Enter an OpenAI API key")
        self.code = "MISSING_API_KEY"


class EmptyManualEntryError(ValidationError):
    """Manual form submitted without a single health value."""

    def __init__(self):
        super().__init__(field="form", message="Enter at least one health value")
        self.code = "EMPTY_MANUAL_ENTRY"


class UnitConversionError(AIHealthException):
    """Unknown unit or incompatible unit pairing."""

    def __init__(self, from_unit: str, to_unit: str):
        super().__init__(
            message=f"Cannot convert {from_unit!r} to {to_unit!r}",
            code="UNIT_CONVERSION_ERROR",
            status_code=500,
            details={"from_unit": from_unit, "to_unit": to_unit},
        )


class HealthAuthorizationError(AIHealthException):
    """Read access to the health data source was denied."""

    def __init__(self, message: str = "No access to health data"):
        super().__init__(
            message=message,
            code="HEALTH_AUTHORIZATION_ERROR",
            status_code=403,
        )


class ExternalServiceError(AIHealthException):
    """Base class for external service errors."""

    def __init__(self, service: str, message: str):
        super().__init__(
            message=f"External service error ({service}): {message}",
            code="EXTERNAL_SERVICE_ERROR",
            status_code=502,
            details={"service": service},
        )


class HealthDataUnavailableError(ExternalServiceError):
    """The health data source is not configured or cannot be read."""

    def __init__(self, message: str = "Health data is not available"):
        super().__init__(service="HealthData", message=message)
        self.code = "HEALTH_DATA_UNAVAILABLE"
        self.status_code = 503


class HealthQueryError(ExternalServiceError):
    """A single metric query against the data source failed."""

    def __init__(self, metric: str, message: str):
        super().__init__(service="HealthData", message=message)
        self.details["metric"] = metric
        self.code = "HEALTH_QUERY_ERROR"


class OpenAIServiceError(ExternalServiceError):
    """Non-2xx response from the model endpoint.

    The message is the raw response body so the caller sees exactly what
    the server said.
    """

    def __init__(self, upstream_status: int, body: str):
        super().__init__(service="OpenAI", message=body)
        self.message = body
        self.details["upstream_status"] = upstream_status
        self.code = "OPENAI_SERVICE_ERROR"


class EmptyModelResponseError(ExternalServiceError):
    """The model answered without any message content."""

    def __init__(self, message: str = "Empty response from the model"):
        super().__init__(service="OpenAI", message=message)
        self.message = message
        self.code = "EMPTY_RESPONSE"


class InvalidModelResponseError(ExternalServiceError):
    """The model response could not be parsed."""

    def __init__(self, message: str = "Could not parse the OpenAI response"):
        super().__init__(service="OpenAI", message=message)
        self.message = message
        self.code = "INVALID_RESPONSE"

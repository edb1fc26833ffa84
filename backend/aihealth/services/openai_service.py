"""Client for an OpenAI-compatible chat completions endpoint."""

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from aihealth.config import get_settings
from aihealth.core.exceptions import (
    EmptyModelResponseError,
    ExternalServiceError,
    InvalidModelResponseError,
    OpenAIServiceError,
)
from aihealth.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class UsageData:
    """Token usage reported by the API."""

    prompt_tokens: int
    completion_tokens: int

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens

    def to_dict(self) -> dict[str, Any]:
        return {
            "prompt_tokens": self.prompt_tokens,
            "completion_tokens": self.completion_tokens,
            "total_tokens": self.total_tokens,
        }


@dataclass
class ChatResult:
    message: str
    usage: Optional[UsageData] = None


class OpenAIService:
    """
    Sends one prompt per call: a fixed system message followed by the
    user prompt. There is no retry; a non-2xx status is raised with the
    server's response body as the message.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        system_message: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self.timeout = httpx.Timeout(timeout or settings.openai_timeout_seconds, connect=10.0)
        self.system_message = system_message or settings.system_message
        self._transport = transport

    def build_payload(self, prompt: str, model: str) -> dict[str, Any]:
        return {
            "model": model,
            "messages": [
                {"role": "system", "content": self.system_message},
                {"role": "user", "content": prompt},
            ],
        }

    async def send_prompt(self, prompt: str, api_key: str, model: str) -> ChatResult:
        """Send ``prompt`` to ``model`` and return the trimmed answer."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=self.build_payload(prompt, model),
                    headers={"Authorization": f"Bearer {api_key}"},
                )
            except httpx.HTTPError as e:
                logger.error("openai_request_failed", model=model, error=str(e))
                raise ExternalServiceError("OpenAI", str(e)) from e

        if not response.is_success:
            logger.warning("openai_error_status", model=model, status=response.status_code)
            raise OpenAIServiceError(response.status_code, response.text)

        result = self.parse_response(response)
        logger.info(
            "openai_prompt_completed",
            model=model,
            prompt_tokens=result.usage.prompt_tokens if result.usage else None,
            completion_tokens=result.usage.completion_tokens if result.usage else None,
        )
        return result

    @staticmethod
    def parse_response(response: httpx.Response) -> ChatResult:
        try:
            data = response.json()
            choices = data["choices"]
            usage_data = data.get("usage")
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise InvalidModelResponseError() from e

        if not isinstance(choices, list):
            raise InvalidModelResponseError()
        if not choices:
            raise EmptyModelResponseError()

        try:
            content = choices[0]["message"].get("content")
        except (KeyError, TypeError, AttributeError) as e:
            raise InvalidModelResponseError() from e

        if content is not None and not isinstance(content, str):
            raise InvalidModelResponseError()
        message = (content or "").strip()
        if not message:
            raise EmptyModelResponseError()

        usage = None
        if isinstance(usage_data, dict):
            try:
                usage = UsageData(
                    prompt_tokens=int(usage_data["prompt_tokens"]),
                    completion_tokens=int(usage_data["completion_tokens"]),
                )
            except (KeyError, TypeError, ValueError) as e:
                raise InvalidModelResponseError() from e

        return ChatResult(message=message, usage=usage)

"""
OpenAI chat-completion provider
-------------------------------

`OpenAIChatProvider` is the single upstream client used by the GraphQL
resolvers. It performs exactly one `POST /chat/completions` per call.

1) Base URL and timeout
   - Both come from `Settings` (`OPENAI_BASE_URL`, `OPENAI_TIMEOUT_SECONDS`).
     The base URL defaults to OpenAI's public endpoint.
   - The timeout bounds the whole call; exceeding it raises
     `ProviderTimeoutError`.

2) Authentication
   - The API key is passed per call and sent as a Bearer token. It is never
     stored on the provider nor logged.

3) Schema mapping
   - Input: `ChatCompletionRequest` is serialized to
     `{model, messages, temperature}`.
   - Output: the JSON body is validated into `ChatCompletion`. Anything that
     does not parse or validate raises `ProviderResponseError`.

4) Error handling
   - Non-2xx responses raise `ProviderHTTPError` carrying the status and
     upstream error payload. Bodies that are not JSON are wrapped as
     `{"error": <text>}`. No retries are attempted.
"""

from typing import Any, Dict

import httpx
from pydantic import ValidationError

from gpt_gateway.config import Settings
from gpt_gateway.providers.base import (
    ChatCompletionProvider,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from gpt_gateway.schemas.completion import ChatCompletion, ChatCompletionRequest


class OpenAIChatProvider(ChatCompletionProvider):
    """Thin client for the OpenAI Chat Completions endpoint.

    Attributes:
        base_url: Base URL of the API, e.g. "https://api.openai.com/v1".
        timeout_seconds: Upper bound for a single completion call.
    """

    def __init__(self, base_url: str, timeout_seconds: float) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIChatProvider":
        return cls(
            base_url=settings.openai_base_url,
            timeout_seconds=settings.openai_timeout_seconds,
        )

    def _headers(self, api_key: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    @staticmethod
    def _payload(request: ChatCompletionRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": request.model,
            "messages": [
                {"role": m.role, "content": m.content} for m in request.messages
            ],
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        return payload

    @staticmethod
    def _error_payload(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return {"error": response.text}

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return
        raise ProviderHTTPError(status, self._error_payload(response))

    async def create_chat_completion(
        self, request: ChatCompletionRequest, api_key: str
    ) -> ChatCompletion:
        """Send one chat-completion request and validate the reply."""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout_seconds
            ) as client:
                response = await client.post(
                    "/chat/completions",
                    headers=self._headers(api_key),
                    json=self._payload(request),
                )
        except httpx.TimeoutException as exc:
            raise ProviderTimeoutError(
                f"OpenAI API did not respond within {self.timeout_seconds:g}s"
            ) from exc

        self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderResponseError("OpenAI API returned a non-JSON body") from exc
        try:
            return ChatCompletion.model_validate(data)
        except ValidationError as exc:
            raise ProviderResponseError(
                f"OpenAI API returned an unexpected body: {exc}"
            ) from exc

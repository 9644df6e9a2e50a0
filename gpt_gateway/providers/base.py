import json
from abc import ABC, abstractmethod
from typing import Any

from gpt_gateway.schemas.completion import ChatCompletion, ChatCompletionRequest

UPSTREAM_FAILURE_MESSAGE = "Failed to get response from OpenAI"


class ProviderError(Exception):
    """Base class for provider-specific errors raised intentionally.

    Resolvers catch these (and anything else) at their boundary; only
    `ProviderConfigurationError` and `CompletionFailedError` messages are
    ever shown to API callers.
    """


class ProviderConfigurationError(ProviderError):
    """Raised when the upstream credential is not configured."""

    def __init__(self, message: str = "OpenAI API key is not configured"):
        super().__init__(message)


class ProviderHTTPError(ProviderError):
    """Raised when the upstream answers with a non-success status.

    Carries the upstream's error payload verbatim for diagnostics.
    """

    def __init__(self, status_code: int, payload: Any = None):
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"OpenAI API error: {json.dumps(payload, ensure_ascii=False)}")


class ProviderTimeoutError(ProviderError):
    """Raised when the upstream does not answer within the configured bound."""


class ProviderResponseError(ProviderError):
    """Raised when a success response is not a valid completion body."""


class CompletionFailedError(ProviderError):
    """User-facing failure; deliberately carries no upstream detail."""

    def __init__(self, message: str = UPSTREAM_FAILURE_MESSAGE):
        super().__init__(message)


class ChatCompletionProvider(ABC):
    @abstractmethod
    async def create_chat_completion(
        self, request: ChatCompletionRequest, api_key: str
    ) -> ChatCompletion: ...

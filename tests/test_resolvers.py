import logging
import types

import httpx
import pytest

from gpt_gateway.config import Settings
from gpt_gateway.metrics import sample
from gpt_gateway.providers.base import (
    ChatCompletionProvider,
    CompletionFailedError,
    ProviderConfigurationError,
    ProviderTimeoutError,
)
from gpt_gateway.resolvers import resolve_ask_openai, resolve_chat
from gpt_gateway.schemas.completion import ChatCompletion
from gpt_gateway.schemas.results import ChatResult, CompletionResult

from conftest import completion_body


class RecordingProvider(ChatCompletionProvider):
    def __init__(self, body=None, error=None):
        self.body = body or completion_body()
        self.error = error
        self.requests = []

    async def create_chat_completion(self, request, api_key):
        self.requests.append((request, api_key))
        if self.error is not None:
            raise self.error
        return ChatCompletion.model_validate(self.body)


def _info(provider, api_key="sk-test"):
    return types.SimpleNamespace(
        context={"settings": Settings(openai_api_key=api_key), "provider": provider}
    )


@pytest.mark.asyncio
async def test_resolve_chat_returns_text_only():
    provider = RecordingProvider(completion_body(content="你好，世界"))
    result = await resolve_chat(None, _info(provider), message="hello")
    assert result == ChatResult(text="你好，世界")
    request, api_key = provider.requests[0]
    assert api_key == "sk-test"
    assert request.model == "gpt-3.5-turbo"
    assert request.temperature == 0.7
    assert request.messages[-1].content == "hello"


@pytest.mark.asyncio
async def test_resolve_ask_openai_builds_result():
    provider = RecordingProvider(
        completion_body(content="42", finish_reason="stop", prompt_tokens=3, completion_tokens=4, total_tokens=7)
    )
    result = await resolve_ask_openai(None, _info(provider), prompt="answer?", model="gpt-4o")
    assert isinstance(result, CompletionResult)
    assert result.text == "42"
    assert (result.usage.prompt_tokens, result.usage.completion_tokens, result.usage.total_tokens) == (3, 4, 7)
    assert result.metadata.model == "gpt-4o"
    assert result.metadata.finish_reason == "stop"
    assert provider.requests[0][0].model == "gpt-4o"


@pytest.mark.asyncio
async def test_resolve_ask_openai_explicit_null_model_uses_default():
    provider = RecordingProvider()
    result = await resolve_ask_openai(None, _info(provider), prompt="hi", model=None)
    assert result.metadata.model == "gpt-3.5-turbo"


@pytest.mark.asyncio
@pytest.mark.parametrize("api_key", [None, "", "   "])
async def test_missing_key_raises_configuration_error(api_key, caplog):
    provider = RecordingProvider()
    with caplog.at_level(logging.ERROR, logger="gpt_gateway.resolvers"):
        with pytest.raises(ProviderConfigurationError, match="OpenAI API key is not configured"):
            await resolve_chat(None, _info(provider, api_key=api_key), message="hi")
    assert provider.requests == []
    assert len([r for r in caplog.records if r.name == "gpt_gateway.resolvers"]) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        ProviderTimeoutError("too slow"),
        httpx.ConnectError("connection refused"),
        KeyError("choices"),
    ],
)
async def test_any_failure_becomes_generic_error(error, caplog):
    provider = RecordingProvider(error=error)
    with caplog.at_level(logging.ERROR, logger="gpt_gateway.resolvers"):
        with pytest.raises(CompletionFailedError) as info:
            await resolve_ask_openai(None, _info(provider), prompt="hi")
    assert str(info.value) == "Failed to get response from OpenAI"
    assert info.value.__cause__ is error
    records = [r for r in caplog.records if r.name == "gpt_gateway.resolvers"]
    assert len(records) == 1
    assert records[0].exc_info is not None


@pytest.mark.asyncio
async def test_missing_finish_reason_is_generic_error():
    provider = RecordingProvider(completion_body(finish_reason=None))
    with pytest.raises(CompletionFailedError):
        await resolve_ask_openai(None, _info(provider), prompt="hi")


@pytest.mark.asyncio
async def test_reshape_failure_counts_as_error_outcome():
    labels = {
        "provider": "RecordingProvider",
        "operation": "askOpenAI",
        "outcome": "error",
    }
    success_labels = {**labels, "outcome": "success"}
    before = sample("provider_requests_total", **labels)
    success_before = sample("provider_requests_total", **success_labels)
    body = completion_body()
    del body["usage"]
    with pytest.raises(CompletionFailedError):
        await resolve_ask_openai(None, _info(RecordingProvider(body)), prompt="hi")
    assert sample("provider_requests_total", **labels) == before + 1
    assert sample("provider_requests_total", **success_labels) == success_before

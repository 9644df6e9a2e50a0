import logging
import time
from typing import Any, Callable, Optional, TypeVar

from graphql import GraphQLResolveInfo

from gpt_gateway.config import (
    ASK_SYSTEM_PROMPT,
    CHAT_SYSTEM_PROMPT,
    DEFAULT_MODEL,
    TEMPERATURE,
    Settings,
)
from gpt_gateway.metrics import record_provider_call
from gpt_gateway.providers.base import (
    ChatCompletionProvider,
    CompletionFailedError,
    ProviderConfigurationError,
    ProviderResponseError,
)
from gpt_gateway.schemas.completion import (
    ChatCompletion,
    ChatCompletionRequest,
    Message,
)
from gpt_gateway.schemas.results import (
    ChatInput,
    ChatResult,
    CompletionInput,
    CompletionMetadata,
    CompletionResult,
    TokenUsage,
)

logger = logging.getLogger("gpt_gateway.resolvers")

T = TypeVar("T")


def _build_request(model: str, system_prompt: str, user_content: str) -> ChatCompletionRequest:
    return ChatCompletionRequest(
        model=model,
        messages=[
            Message(role="system", content=system_prompt),
            Message(role="user", content=user_content),
        ],
        temperature=TEMPERATURE,
    )


async def _complete(
    info: GraphQLResolveInfo,
    operation: str,
    request: ChatCompletionRequest,
    reshape: Callable[[ChatCompletion], T],
) -> T:
    """Run one upstream call for `operation` and reshape its reply.

    The configuration error keeps its message; any other failure, reshaping
    included, is logged with full detail and replaced by
    `CompletionFailedError`.
    """
    settings: Settings = info.context["settings"]
    provider: ChatCompletionProvider = info.context["provider"]

    if not settings.api_key_configured:
        logger.error("resolver.%s failed: OpenAI API key is not configured", operation)
        raise ProviderConfigurationError()

    start = time.perf_counter()
    outcome = "success"
    try:
        completion = await provider.create_chat_completion(
            request, settings.openai_api_key
        )
        return reshape(completion)
    except Exception as exc:
        outcome = "error"
        logger.exception(
            "resolver.%s failed model=%s: %s", operation, request.model, exc
        )
        raise CompletionFailedError() from exc
    finally:
        record_provider_call(
            provider=type(provider).__name__,
            operation=operation,
            outcome=outcome,
            duration=time.perf_counter() - start,
        )


def _chat_result(completion: ChatCompletion) -> ChatResult:
    return ChatResult(text=completion.choices[0].message.content)


def _completion_result(model: str) -> Callable[[ChatCompletion], CompletionResult]:
    def reshape(completion: ChatCompletion) -> CompletionResult:
        choice = completion.choices[0]
        if completion.usage is None:
            raise ProviderResponseError("OpenAI API response carries no usage")
        if choice.finish_reason is None:
            raise ProviderResponseError("OpenAI API response carries no finish_reason")
        return CompletionResult(
            text=choice.message.content,
            usage=TokenUsage(
                prompt_tokens=completion.usage.prompt_tokens,
                completion_tokens=completion.usage.completion_tokens,
                total_tokens=completion.usage.total_tokens,
            ),
            metadata=CompletionMetadata(model=model, finish_reason=choice.finish_reason),
        )

    return reshape


async def resolve_chat(_: Any, info: GraphQLResolveInfo, message: str) -> ChatResult:
    args = ChatInput(message=message)
    request = _build_request(
        model=DEFAULT_MODEL,
        system_prompt=CHAT_SYSTEM_PROMPT,
        user_content=args.message,
    )
    return await _complete(info, "chat", request, _chat_result)


async def resolve_ask_openai(
    _: Any, info: GraphQLResolveInfo, prompt: str, model: Optional[str] = None
) -> CompletionResult:
    args = (
        CompletionInput(prompt=prompt)
        if model is None
        else CompletionInput(prompt=prompt, model=model)
    )
    request = _build_request(
        model=args.model,
        system_prompt=ASK_SYSTEM_PROMPT,
        user_content=args.prompt,
    )
    return await _complete(info, "askOpenAI", request, _completion_result(args.model))

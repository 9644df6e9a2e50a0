"""Typed records returned by the GraphQL resolvers.

Field names are snake_case; the executable schema converts them to the
camelCase names exposed over GraphQL (``finish_reason`` -> ``finishReason``).
"""

from pydantic import BaseModel, ConfigDict, Field

from gpt_gateway.config import DEFAULT_MODEL


class ChatInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class CompletionInput(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    prompt: str
    model: str = DEFAULT_MODEL


class ChatResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str


class TokenUsage(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = Field(ge=0)
    completion_tokens: int = Field(ge=0)
    total_tokens: int = Field(ge=0)


class CompletionMetadata(BaseModel):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: str
    finish_reason: str


class CompletionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    usage: TokenUsage
    metadata: CompletionMetadata

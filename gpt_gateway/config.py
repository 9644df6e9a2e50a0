import os
from typing import Optional

from pydantic import BaseModel, ConfigDict

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TIMEOUT_SECONDS = 60.0

# Upstream request shape shared by both operations
DEFAULT_MODEL = "gpt-3.5-turbo"
TEMPERATURE = 0.7
CHAT_SYSTEM_PROMPT = "请用中文回复用户的所有问题。"
ASK_SYSTEM_PROMPT = (
    "你是一个有帮助的AI助手。请直接回答用户的问题，不要质疑他们的输入内容。"
    "如果用户输入不明确或简短，尝试理解并提供最相关的回应。请用中文回复。"
)

# Fixed, permissive cross-origin policy
CORS_ALLOW_ORIGINS = ["*"]
CORS_ALLOW_METHODS = ["GET", "POST", "OPTIONS"]
CORS_ALLOW_HEADERS = ["Content-Type", "Authorization", "Apollo-Require-Preflight"]
CORS_ALLOW_CREDENTIALS = False
CORS_MAX_AGE = 86400

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
    "Access-Control-Max-Age": str(CORS_MAX_AGE),
}


class Settings(BaseModel):
    """Per-request view of the upstream configuration.

    The API key is treated as opaque: it is never logged and only its
    presence is reported by the health endpoint.
    """

    model_config = ConfigDict(frozen=True)

    openai_api_key: Optional[str] = None
    openai_base_url: str = DEFAULT_BASE_URL
    openai_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def api_key_configured(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key.strip())


def get_settings() -> Settings:
    """Dependency building `Settings` from the environment.

    The environment is read on every call so that secrets rotated by the
    hosting platform are picked up without a restart.
    """
    try:
        timeout_seconds = float(
            os.getenv("OPENAI_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
            or DEFAULT_TIMEOUT_SECONDS
        )
    except ValueError:
        timeout_seconds = DEFAULT_TIMEOUT_SECONDS
    if timeout_seconds <= 0:
        timeout_seconds = DEFAULT_TIMEOUT_SECONDS
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_base_url=(
            os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL) or DEFAULT_BASE_URL
        ).rstrip("/"),
        openai_timeout_seconds=timeout_seconds,
    )

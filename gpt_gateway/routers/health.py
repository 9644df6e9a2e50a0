from fastapi import APIRouter, Depends, Request
import os
import time

from gpt_gateway.config import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_ORIGINS,
    CORS_MAX_AGE,
    Settings,
    get_settings,
)

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request, settings: Settings = Depends(get_settings)):
    # Uptime since process start
    start_time = getattr(request.app.state, "start_time", None)
    uptime_seconds = time.time() - start_time if start_time else None

    # The service can answer GraphQL without a key (resolvers report the
    # configuration error), so a missing key degrades rather than fails.
    status = "ok" if settings.api_key_configured else "degraded"

    return {
        "status": status,
        "uptime_seconds": uptime_seconds,
        "version": os.getenv("APP_VERSION") or "1.0",
        "upstream": {
            "base_url": settings.openai_base_url,
            "timeout_seconds": settings.openai_timeout_seconds,
            "api_key_configured": settings.api_key_configured,
        },
        "logging": {
            "enabled": os.getenv("LOG_REQUESTS", "false").lower()
            in {"1", "true", "yes"},
            "level": os.getenv("LOG_LEVEL", "INFO").upper(),
        },
        "cors": {
            "allow_origins": CORS_ALLOW_ORIGINS,
            "allow_methods": CORS_ALLOW_METHODS,
            "allow_headers": CORS_ALLOW_HEADERS,
            "max_age": CORS_MAX_AGE,
        },
    }

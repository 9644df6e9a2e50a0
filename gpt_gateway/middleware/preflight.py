from fastapi import Response

from gpt_gateway.config import PREFLIGHT_HEADERS


async def preflight_middleware(request, call_next):
    """Answer CORS preflight on any path without touching the routers."""
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=PREFLIGHT_HEADERS)
    return await call_next(request)

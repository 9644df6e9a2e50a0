from fastapi import FastAPI, Response, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import time
import uuid
import logging
from gpt_gateway.config import (
    CORS_ALLOW_CREDENTIALS,
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_ORIGINS,
    CORS_MAX_AGE,
)
from gpt_gateway.routers.health import router as health_router
from gpt_gateway.routers.graphql_api import router as graphql_router
from gpt_gateway.metrics import (
    registry,
    CONTENT_TYPE_LATEST,
    generate_latest,
)
from gpt_gateway.middleware.request_id import request_id_and_metrics_middleware
from gpt_gateway.middleware.logging import request_logging_middleware
from gpt_gateway.middleware.preflight import preflight_middleware

app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
app.state.start_time = time.time()

# Permissive CORS for every non-preflight response. Wildcard origin means
# credentials stay disabled.
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=CORS_ALLOW_CREDENTIALS,
    allow_methods=CORS_ALLOW_METHODS,
    allow_headers=CORS_ALLOW_HEADERS,
    max_age=CORS_MAX_AGE,
)


# Register middlewares (order matters: the last one registered runs first)
@app.middleware("http")
async def _request_id_and_metrics(request, call_next):
    return await request_id_and_metrics_middleware(request, call_next)


@app.middleware("http")
async def _request_logging(request, call_next):
    return await request_logging_middleware(request, call_next)


@app.middleware("http")
async def _preflight(request, call_next):
    return await preflight_middleware(request, call_next)


# Global exception handler
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    request_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    # Log unhandled exceptions with request correlation for debugging
    logging.getLogger("gpt_gateway.errors").exception(
        "unhandled_exception rid=%s path=%s method=%s", request_id, request.url.path, request.method
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "request_id": request_id},
        headers={"x-request-id": request_id},
    )


# Metrics endpoint
@app.get("/metrics")
async def metrics() -> Response:
    return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)


# Routers; GraphQL is a catch-all and must come last
app.include_router(health_router)
app.include_router(graphql_router)

import os
import time
import logging

_TRUTHY = {"1", "true", "yes"}

_logger = logging.getLogger("gpt_gateway.request")


def _configure(logger: logging.Logger) -> bool:
    """Attach a stream handler when LOG_REQUESTS is on; return the flag.

    Global logging is left alone so Uvicorn keeps managing its own handlers.
    """
    enabled = os.getenv("LOG_REQUESTS", "false").lower() in _TRUTHY
    if not enabled:
        return False
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(logger.level)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.propagate = False
    return True


LOG_REQUESTS = _configure(_logger)


def _request_id(request) -> str:
    return getattr(
        request.state, "request_id", request.headers.get("x-request-id") or "-"
    )


async def request_logging_middleware(request, call_next):
    if not LOG_REQUESTS:
        return await call_next(request)
    start = time.perf_counter()

    # Body is never read here: GraphQL variables may carry user prompts
    if _logger.isEnabledFor(logging.DEBUG):
        _logger.debug(
            "incoming rid=%s method=%s path=%s content_length=%s origin=%s",
            _request_id(request),
            request.method,
            request.url.path,
            request.headers.get("content-length"),
            request.headers.get("origin", ""),
        )

    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000.0

    _logger.info(
        "rid=%s method=%s path=%s status=%s duration_ms=%.2f client=%s ua=%s auth=%s",
        _request_id(request),
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
        request.client.host if request.client else "",
        request.headers.get("user-agent", ""),
        "redacted" if "authorization" in request.headers else "none",
    )
    return response

import uuid
import time
from gpt_gateway.metrics import record_http_request

# Every other path is served by the GraphQL catch-all; collapse them into
# one label so arbitrary client paths cannot blow up metric cardinality.
_FIXED_PATHS = {"/healthz", "/metrics"}


def path_label(path: str) -> str:
    return path if path in _FIXED_PATHS else "graphql"


def _observe(request, status: str, start_time: float) -> None:
    record_http_request(
        method=request.method,
        path=path_label(request.url.path),
        status=status,
        duration=time.perf_counter() - start_time,
    )


async def request_id_and_metrics_middleware(request, call_next):
    start_time = time.perf_counter()
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = request_id
    try:
        response = await call_next(request)
    except Exception:
        _observe(request, "500", start_time)
        raise
    _observe(request, str(response.status_code), start_time)
    response.headers["x-request-id"] = request_id
    return response

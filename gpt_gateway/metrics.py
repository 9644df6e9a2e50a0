from prometheus_client import (
    Counter,
    Histogram,
    CollectorRegistry,
    CONTENT_TYPE_LATEST,
    generate_latest,
)

registry = CollectorRegistry()

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
    registry=registry,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path", "status"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
    registry=registry,
)

# One upstream completion call per resolved GraphQL field
provider_requests_total = Counter(
    "provider_requests_total",
    "Total upstream completion calls by provider and GraphQL operation",
    ["provider", "operation", "outcome"],
    registry=registry,
)

provider_request_duration_seconds = Histogram(
    "provider_request_duration_seconds",
    "Upstream completion call latency in seconds",
    ["provider", "operation", "outcome"],
    buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 30, 60),
    registry=registry,
)


def record_http_request(method: str, path: str, status: str, duration: float) -> None:
    labels = {"method": method, "path": path, "status": status}
    http_requests_total.labels(**labels).inc()
    http_request_duration_seconds.labels(**labels).observe(duration)


def record_provider_call(
    provider: str, operation: str, outcome: str, duration: float
) -> None:
    labels = {"provider": provider, "operation": operation, "outcome": outcome}
    provider_requests_total.labels(**labels).inc()
    provider_request_duration_seconds.labels(**labels).observe(duration)


def sample(name: str, **labels: str) -> float:
    """Current value of a sample in this registry, 0.0 when never observed."""
    return registry.get_sample_value(name, labels) or 0.0


__all__ = [
    "registry",
    "record_http_request",
    "record_provider_call",
    "sample",
    "CONTENT_TYPE_LATEST",
    "generate_latest",
]

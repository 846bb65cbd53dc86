"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Event CRUD metrics
event_operations = Counter(
    'event_operations_total',
    'Event operations handled',
    ['operation', 'outcome']  # create/update/...; success, not_found, conflict, failure
)

validation_rejections = Counter(
    'validation_rejections_total',
    'Payload fields rejected by validation',
    ['field', 'code']
)

upload_authorizations = Counter(
    'upload_authorizations_total',
    'Image upload URLs issued',
    ['content_type']
)

request_latency = Histogram(
    'request_latency_seconds',
    'HTTP request latency',
    ['method'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_event_operation(operation: str, outcome: str = "success"):
    """Record an event operation. Outcome: success, not_found, conflict, failure"""
    event_operations.labels(operation=operation, outcome=outcome).inc()


def record_validation_rejection(field: str, code: str):
    validation_rejections.labels(field=field, code=code).inc()


def record_upload_authorization(content_type: str):
    upload_authorizations.labels(content_type=content_type).inc()


def observe_request(method: str, duration_seconds: float):
    request_latency.labels(method=method).observe(duration_seconds)

"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Registration metrics
registration_attempts = Counter(
    'registration_attempts_total',
    'Registration attempts by outcome',
    ['outcome']  # registered, not_found, past_event, duplicate, full, contention
)

registration_latency = Histogram(
    'registration_latency_seconds',
    'Time spent deciding and storing a registration',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

admission_retries = Counter(
    'admission_retries_total',
    'Admission re-checks caused by a concurrent registration on the same event'
)

cancellations = Counter(
    'cancellations_total',
    'Registration cancellations by outcome',
    ['outcome']  # cancelled, not_found
)

events_created = Counter(
    'events_created_total',
    'Events created'
)


def metrics_endpoint() -> Response:
    """Render every registered collector in the Prometheus text format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_registration(outcome: str):
    """Record registration attempt. Outcome: registered, not_found, past_event, duplicate, full, contention"""
    registration_attempts.labels(outcome=outcome).inc()


def record_cancellation(outcome: str):
    cancellations.labels(outcome=outcome).inc()


def record_admission_retry():
    admission_retries.inc()


def record_event_created():
    events_created.inc()

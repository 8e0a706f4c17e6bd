"""
Prometheus metrics for booth request transitions.
Exposed at /metrics.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

request_transitions = Counter(
    'booth_request_transitions_total',
    'Booth request state changes',
    ['transition']  # created, accepted, declined, updated, deleted
)

siblings_declined = Counter(
    'booth_request_siblings_declined_total',
    'Sibling requests declined as a side effect of an acceptance'
)

persistence_errors = Counter(
    'booth_request_persistence_errors_total',
    'Writes or reads rejected by the database',
    ['operation']
)


def metrics_endpoint() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_transition(transition: str):
    """Record a request transition. Transition: created, accepted, declined, updated, deleted"""
    request_transitions.labels(transition=transition).inc()


def record_siblings_declined(count: int):
    if count > 0:
        siblings_declined.inc(count)


def record_persistence_error(operation: str):
    persistence_errors.labels(operation=operation).inc()

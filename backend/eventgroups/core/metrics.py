"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Registration metrics
registration_attempts = Counter(
    'group_registration_attempts_total',
    'Total group registration and roster update attempts',
    ['operation', 'result']  # create/update/add_member; success, group_size_limit, participant_limit, conflict
)

# Database metrics
db_retries = Counter(
    'db_retry_attempts_total',
    'Database retry attempts due to event version conflicts'
)

groups_deleted = Counter(
    'groups_deleted_total',
    'Total groups deleted'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_registration(operation: str, result: str):
    """Record a roster write. Result: success, group_size_limit, participant_limit, conflict"""
    registration_attempts.labels(operation=operation, result=result).inc()


def record_db_retry():
    db_retries.inc()


def record_group_deleted():
    groups_deleted.inc()

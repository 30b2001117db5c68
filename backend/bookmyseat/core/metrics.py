"""
Prometheus metrics for the booking ledger, served at /metrics.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Reservation outcomes
booking_attempts = Counter(
    'booking_attempts_total',
    'Total reservation attempts',
    ['status']  # success, insufficient, not_bookable, not_found, invalid
)

booking_latency = Histogram(
    'booking_latency_seconds',
    'Reservation latency inside the ledger',
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Status machine
booking_transitions = Counter(
    'booking_transitions_total',
    'Booking status transitions applied',
    ['status']  # approved, rejected, paid, cancelled
)

inventory_restored = Counter(
    'inventory_units_restored_total',
    'Ticket units returned to inventory by rejection or cancellation'
)

# Admission gate
admission_requests = Counter(
    'admission_requests_total',
    'Admission gate decisions',
    ['result']  # admitted, rejected
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis errors seen by the admission gate'
)


def metrics_endpoint() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    booking_attempts.labels(status=status).inc()


def record_transition(status: str, restored: int = 0):
    booking_transitions.labels(status=status).inc()
    if restored:
        inventory_restored.inc(restored)


def record_admission(admitted: bool):
    admission_requests.labels(result="admitted" if admitted else "rejected").inc()

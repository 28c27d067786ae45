"""Prometheus metrics for the Studio Billing service.

Metrics are organized into two categories:

Business Metrics (for Finance/Operations):
- studio_installment_operation_total: Completed operations by name and outcome
- studio_installment_rejection_total: Rejected operations by error code
- studio_payment_amount_total: Money recorded as paid
- studio_installments_marked_overdue_total: Installments moved to OVERDUE

Technical Metrics (for Engineering/SRE):
- studio_operation_latency_seconds: Operation latency
- studio_event_delivery_latency_seconds: Event delivery latency
- studio_event_retry_total: Event delivery retries
- studio_event_failures_total / studio_event_success_total
- studio_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from src.domain.exceptions import DomainException


# =============================================================================
# Business Metrics (Finance/Operations dashboards)
# =============================================================================

operation_total = Counter(
    "studio_installment_operation_total",
    "Total number of installment engine operations",
    ["operation", "outcome"],  # outcome: success, rejected, failed
)

rejection_total = Counter(
    "studio_installment_rejection_total",
    "Operations rejected by a domain rule",
    ["code"],
)

payment_amount_total = Counter(
    "studio_payment_amount_total",
    "Total amount recorded as paid, in the smallest currency unit",
    ["payment_method"],
)

overdue_marked_total = Counter(
    "studio_installments_marked_overdue_total",
    "Total number of installments moved to OVERDUE",
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

operation_latency = Histogram(
    "studio_operation_latency_seconds",
    "Installment engine operation latency in seconds",
    ["operation"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

event_latency = Histogram(
    "studio_event_delivery_latency_seconds",
    "Event delivery latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

event_retries = Counter(
    "studio_event_retry_total",
    "Total number of event delivery retries",
)

event_failures = Counter(
    "studio_event_failures_total",
    "Total number of event delivery failures (after all retries)",
)

event_success = Counter(
    "studio_event_success_total",
    "Total number of successful event deliveries",
)

http_requests_total = Counter(
    "studio_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "studio_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_operation(operation: str, outcome: str = "success") -> None:
    """Record a completed operation."""
    operation_total.labels(operation=operation, outcome=outcome).inc()


def record_rejection(code: str) -> None:
    """Record an operation rejected by a domain rule."""
    rejection_total.labels(code=code).inc()


def record_payment(amount: int, payment_method: str) -> None:
    """Record money collected for an installment."""
    payment_amount_total.labels(payment_method=payment_method).inc(amount)


def record_overdue_marked(count: int) -> None:
    """Record installments moved to OVERDUE by a sweep."""
    overdue_marked_total.inc(count)


@contextmanager
def track_operation_latency(operation: str) -> Generator[None, None, None]:
    """
    Track operation latency, and count operations that do not complete.

    A DomainException counts as `rejected`, any other exception as
    `failed`. Successes are recorded by the caller with record_operation
    once the response is built.
    """
    start = time.perf_counter()
    try:
        yield
    except DomainException:
        record_operation(operation, outcome="rejected")
        raise
    except Exception:
        record_operation(operation, outcome="failed")
        raise
    finally:
        duration = time.perf_counter() - start
        operation_latency.labels(operation=operation).observe(duration)


@contextmanager
def track_event_latency() -> Generator[None, None, None]:
    """Context manager to track event delivery latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        event_latency.observe(duration)


def record_event_retry() -> None:
    """Record an event delivery retry attempt."""
    event_retries.inc()


def record_event_success() -> None:
    """Record a successful event delivery."""
    event_success.inc()


def record_event_failure() -> None:
    """Record a failed event delivery (after all retries)."""
    event_failures.inc()


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST

"""
Prometheus metrics for the booking engine.

Service timings come from the @measure_operation decorator; the cache and
slot-lock counters are recorded by the components that own those concerns.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Dedicated registry so tests and multiple app instances don't collide
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "interview_booking_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "interview_booking_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "interview_booking_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

availability_cache_requests_total = Counter(
    "interview_booking_availability_cache_requests_total",
    "Month availability cache lookups by result",
    ["result"],
    registry=REGISTRY,
)

slot_lock_total = Counter(
    "interview_booking_slot_lock_total",
    "Slot lock operations by action and outcome",
    ["action", "outcome"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Records and exposes the engine's Prometheus metrics."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'BookingService')
            operation: Operation name (e.g., 'create_booking')
            duration: Operation duration in seconds
            status: 'success' or 'error'
            error_type: Exception class name when status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_cache_lookup(result: str) -> None:
        """Count a month cache lookup ('hit', 'miss' or 'stale')."""
        availability_cache_requests_total.labels(result=result).inc()

    @staticmethod
    def record_slot_lock(action: str, outcome: str) -> None:
        slot_lock_total.labels(action=action, outcome=outcome).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Generate metrics in Prometheus text exposition format."""
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()

"""Prometheus metrics for monitoring financing decisions, volumes, and settlement delivery"""

from decimal import Decimal

from prometheus_client import Counter, Histogram

# Ledger operation metrics
operation_counter = Counter(
    "scf_operation_total",
    "Ledger operations by outcome",
    ["operation", "outcome"],  # outcome: ok | rejected
)

financed_volume_counter = Counter(
    "scf_financed_volume_total",
    "Funds committed by financing product",
    ["product"],  # factoring | purchase_order | inventory
)

# Settlement webhook metrics
settlement_latency_histogram = Histogram(
    "settlement_webhook_latency_seconds",
    "Settlement webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

settlement_failure_counter = Counter(
    "settlement_webhook_failures_total",
    "Failed settlement webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_operation(operation: str, ok: bool) -> None:
    operation_counter.labels(operation=operation, outcome="ok" if ok else "rejected").inc()


def record_financed_volume(product: str, amount: Decimal) -> None:
    """Track committed funds per product for volume dashboards"""
    financed_volume_counter.labels(product=product).inc(float(amount))

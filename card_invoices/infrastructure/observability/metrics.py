"""Prometheus metrics for purchase volume and invoice maintenance"""

from prometheus_client import Counter, Histogram

# Purchase lifecycle metrics
purchases_created_counter = Counter(
    "purchases_created_total",
    "Purchases registered",
)

purchases_deleted_counter = Counter(
    "purchases_deleted_total",
    "Purchases removed together with their installments",
)

installments_created_counter = Counter(
    "installments_created_total",
    "Installment records materialized",
    ["bucket"],  # 1x, 2-6x, 7-12x, 13x+
)

# Aggregate maintenance
invoice_refresh_counter = Counter(
    "invoice_refresh_total",
    "Monthly invoice totals recomputed",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_purchase_created(total_installments: int) -> None:
    """Record purchase metrics, bucketing installment plans by length"""
    purchases_created_counter.inc()

    if total_installments == 1:
        bucket = "1x"
    elif total_installments <= 6:
        bucket = "2-6x"
    elif total_installments <= 12:
        bucket = "7-12x"
    else:
        bucket = "13x+"

    installments_created_counter.labels(bucket=bucket).inc(total_installments)

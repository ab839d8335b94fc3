"""Prometheus metrics for monitoring credit balances, payments, and record imports"""

from prometheus_client import Counter, Histogram, Gauge

from inala_ledger.domain.models import LedgerTotals

# Ledger metrics
ledger_build_counter = Counter(
    "inala_ledger_builds_total",
    "Credit summaries built",
    ["scope"],  # period | all
)

orphan_payment_counter = Counter(
    "inala_orphan_payments_total",
    "Payments dropped from a summary because the customer had no credit in the window",
)

outstanding_gauge = Gauge(
    "inala_outstanding_cents",
    "Total outstanding credit in the most recently built summary",
)

debtor_gauge = Gauge(
    "inala_clients_with_debt",
    "Customers with an outstanding balance in the most recently built summary",
)

# Payment metrics
payment_counter = Counter(
    "inala_payments_recorded_total",
    "Payments recorded through the API",
    ["method"],
)

payment_amount_histogram = Histogram(
    "inala_payment_amount_cents",
    "Recorded payment amounts",
    buckets=[1_000, 5_000, 10_000, 25_000, 50_000, 100_000, 500_000],
)

# Records store metrics
malformed_field_counter = Counter(
    "inala_malformed_record_fields_total",
    "Record fields coerced during mapping because they were not numeric or not a date",
    ["field"],
)

records_fetch_latency_histogram = Histogram(
    "records_fetch_latency_seconds",
    "Remote records store response time",
    ["collection"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

records_fetch_failure_counter = Counter(
    "records_fetch_failures_total",
    "Failed remote records store calls",
    ["collection"],
)

records_imported_counter = Counter(
    "records_imported_total",
    "Records inserted by sync",
    ["collection"],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_ledger_build(include_all_periods: bool, totals: LedgerTotals, orphans: int) -> None:
    """Record a ledger build and the balances it produced"""
    ledger_build_counter.labels(scope="all" if include_all_periods else "period").inc()
    if orphans:
        orphan_payment_counter.inc(orphans)
    outstanding_gauge.set(totals.total_outstanding_cents)
    debtor_gauge.set(totals.clients_with_debt)


def record_payment(method: str | None, amount_cents: int) -> None:
    """Record a payment taken through the API"""
    payment_counter.labels(method=method or "unspecified").inc()
    payment_amount_histogram.observe(amount_cents)


def record_malformed_field(field: str) -> None:
    """Record a field that was coerced while mapping a store document"""
    malformed_field_counter.labels(field=field).inc()

"""Prometheus metrics for monitoring auth outcomes, ledger writes and report latency"""

from prometheus_client import Counter, Histogram

# Auth metrics
auth_counter = Counter(
    "ledger_auth_total",
    "Signup and login attempts",
    ["event", "outcome"],  # signup|login, success|duplicate|invalid_credentials
)

token_rejection_counter = Counter(
    "ledger_token_rejections_total",
    "Requests rejected by the session gate",
    ["reason"],  # missing | invalid | malformed | verification_error
)

# Ledger metrics
transaction_counter = Counter(
    "ledger_transactions_recorded_total",
    "Transactions written to the ledger",
)

store_failure_counter = Counter(
    "ledger_store_failures_total",
    "Persistence errors surfaced to clients",
    ["kind"],  # failure | timeout
)

# Report metrics
report_duration_histogram = Histogram(
    "ledger_report_duration_seconds",
    "Report query latency",
    ["report"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_auth(event: str, outcome: str) -> None:
    auth_counter.labels(event=event, outcome=outcome).inc()

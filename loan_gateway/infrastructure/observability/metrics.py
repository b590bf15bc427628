"""Prometheus metrics for monitoring admission outcomes and country lookups"""

from prometheus_client import Counter, Histogram

# Admission metrics
admission_counter = Counter(
    "loan_admission_total",
    "Loan requests processed by the admission pipeline",
    ["outcome"],  # admitted | address_unavailable | rate_exceeded | blacklisted | storage_error | error
)

# Country lookup metrics
country_lookup_latency_histogram = Histogram(
    "country_lookup_latency_seconds",
    "Country lookup service response time",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

country_lookup_fallback_counter = Counter(
    "country_lookup_fallback_total",
    "Requests that fell back to the default country code",
    ["reason"],  # lookup_error | unexpected_error | empty_code
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_admission(outcome: str) -> None:
    """Count one admission outcome"""
    admission_counter.labels(outcome=outcome).inc()

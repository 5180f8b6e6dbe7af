"""Prometheus metrics for valuation completeness, source failures and schedule generation"""

from prometheus_client import Counter, Histogram

from valuation_gateway.domain.models import BusinessValuation

# Valuation metrics
valuation_counter = Counter(
    "valuation_total",
    "Total business valuations computed",
    ["outcome"],  # complete | partial
)

component_failure_counter = Counter(
    "valuation_component_failures_total",
    "Valuation components that fell back to zero",
    ["component"],
)

# Upstream source metrics
source_latency_histogram = Histogram(
    "value_source_latency_seconds",
    "External value source response time",
    ["source"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

source_failure_counter = Counter(
    "value_source_failures_total",
    "Failed calls to external value sources",
    ["source"],
)

# Depreciation metrics
schedule_counter = Counter(
    "depreciation_schedules_total",
    "Depreciation schedules generated",
    ["method"],
)

invalid_asset_counter = Counter(
    "invalid_assets_total",
    "Assets whose facts could not produce a schedule",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_valuation(valuation: BusinessValuation) -> None:
    """Record valuation outcome and which components were missing"""
    outcome = "partial" if valuation.is_partial else "complete"
    valuation_counter.labels(outcome=outcome).inc()

    for component in valuation.warnings:
        component_failure_counter.labels(component=component).inc()

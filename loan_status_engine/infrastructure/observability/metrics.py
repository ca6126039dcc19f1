"""Prometheus metrics for monitoring portfolio status mix, data quality and ETL latency"""

from prometheus_client import Counter, Histogram

from loan_status_engine.domain.models import PortfolioSummary

# Portfolio metrics
loans_processed_counter = Counter(
    "loan_etl_loans_processed_total",
    "Loans derived by the ETL",
    ["status"],  # current | delinquent_1..3 | default | restructured
)

# Data quality
orphan_rows_counter = Counter(
    "loan_etl_orphan_rows_total",
    "Continuation rows dropped because no loan header preceded them",
)

workbook_parse_failures_counter = Counter(
    "loan_etl_workbook_parse_failures_total",
    "Uploaded workbooks that could not be read",
)

# ETL latency
etl_duration_histogram = Histogram(
    "loan_etl_duration_seconds",
    "Time to extract, assemble and derive one workbook",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_portfolio(summary: PortfolioSummary, duration_seconds: float) -> None:
    """Record status distribution and data-quality counts for one run"""
    for status, count in summary.status_counts.items():
        if count:
            loans_processed_counter.labels(status=status).inc(count)

    if summary.orphan_rows:
        orphan_rows_counter.inc(len(summary.orphan_rows))

    etl_duration_histogram.observe(duration_seconds)

"""Monitoring configuration for the dashboard."""
from prometheus_client import Counter, Histogram, make_asgi_app

# Upstream metrics
upstream_requests = Counter(
    "wordboard_upstream_requests_total",
    "Total number of requests sent to Notion",
    ["operation"],
)

upstream_errors = Counter(
    "wordboard_upstream_errors_total",
    "Total number of failed Notion requests",
    ["operation"],
)

# Word metrics
words_fetched = Histogram(
    "wordboard_words_fetched",
    "Number of words returned by a full list fetch",
    buckets=[10, 50, 100, 250, 500, 1000, 2500],
)

reviews = Counter(
    "wordboard_reviews_total",
    "Total number of words marked as reviewed",
)

# Error metrics
error_count = Counter(
    "wordboard_errors_total",
    "Total number of errors returned to clients",
    ["error_type"],
)

# Performance metrics
request_duration = Histogram(
    "wordboard_request_duration_seconds",
    "Duration of dashboard requests in seconds",
    ["handler"],
    buckets=[0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)


def metrics_app():
    """ASGI app serving the Prometheus metrics."""
    return make_asgi_app()

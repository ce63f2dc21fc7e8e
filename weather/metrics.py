from __future__ import annotations

from prometheus_client import Counter, Histogram

weather_upstream_requests_total = Counter(
    "weather_upstream_requests_total",
    "Total OpenWeatherMap requests",
    labelnames=["endpoint"],
)

weather_upstream_errors_total = Counter(
    "weather_upstream_errors_total",
    "Total OpenWeatherMap request errors",
    labelnames=["endpoint", "error_type"],
)

weather_upstream_latency_seconds = Histogram(
    "weather_upstream_latency_seconds",
    "Latency of OpenWeatherMap requests",
    labelnames=["endpoint"],
    buckets=(0.1, 0.3, 0.5, 1, 2, 5, 10, 20, 30),
)

weather_aggregate_total = Counter(
    "weather_aggregate_total",
    "Aggregated weather lookups by outcome",
    labelnames=["outcome"],
)

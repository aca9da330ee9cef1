"""Prometheus metrics for letter outcomes, LLM polish and rate limiting"""

from prometheus_client import Counter, Histogram

# Letter metrics
letter_counter = Counter(
    "letter_requests_total",
    "Letter requests by outcome",
    ["outcome"],  # ok | invalid | rate_limited | missing_api_key | llm_error | error
)

severity_counter = Counter(
    "letter_severity_total",
    "Letters generated by severity",
    ["severity"],  # 0..4
)

# LLM polish metrics
polish_counter = Counter(
    "letter_polish_total",
    "LLM polish attempts by result",
    ["result"],  # accepted | cached | rejected | failed | timeout | skipped
)

llm_latency_histogram = Histogram(
    "llm_latency_seconds",
    "LLM response time",
    buckets=[0.25, 0.5, 1.0, 2.0, 4.0, 8.0, 16.0],
)

# Rate limiting
rate_limited_counter = Counter(
    "rate_limited_total",
    "Requests rejected by the per-IP rate limiter",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_letter(outcome: str, severity: int | None = None) -> None:
    """Record request outcome and, for generated letters, the severity bucket"""
    letter_counter.labels(outcome=outcome).inc()
    if severity is not None:
        severity_counter.labels(severity=str(severity)).inc()

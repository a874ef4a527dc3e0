"""
Prometheus metrics definitions for the upload gateway.
All metrics are registered here and can be imported by other modules.
"""
from prometheus_client import Counter, Histogram

# HTTP request metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'path', 'status']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'path'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Error metrics
errors_total = Counter(
    'errors_total',
    'Total errors',
    ['error_type']
)

# Multipart session metrics
uploads_initiated_total = Counter(
    'uploads_initiated_total',
    'Total multipart uploads initiated'
)

part_urls_issued_total = Counter(
    'part_urls_issued_total',
    'Total presigned part upload URLs issued'
)

parts_listed_total = Counter(
    'parts_listed_total',
    'Total committed-part listings served'
)

uploads_completed_total = Counter(
    'uploads_completed_total',
    'Total multipart uploads completed'
)

# Object store metrics
storage_failures_total = Counter(
    'storage_failures_total',
    'Total object store failures',
    ['operation', 'reason']
)

storage_request_duration_seconds = Histogram(
    'storage_request_duration_seconds',
    'Object store request latency in seconds',
    ['operation'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0]
)

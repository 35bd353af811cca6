"""
Prometheus metrics for the entitlement service.

Counters are labelled by brand where the label set stays small; license
and activation ids are never used as labels.
"""

from prometheus_client import Counter, Histogram

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)

# Entitlement metrics
license_keys_created_total = Counter(
    "license_keys_created_total",
    "Total license keys created",
    ["brand_id"],
)

licenses_created_total = Counter(
    "licenses_created_total",
    "Total licenses attached to license keys",
    ["brand_id"],
)

license_transitions_total = Counter(
    "license_transitions_total",
    "License lifecycle transitions",
    ["brand_id", "transition"],
)

# Seat metrics
seat_activations_total = Counter(
    "seat_activations_total",
    "Seats claimed by instances",
    ["brand_id", "kind"],
)

seat_activation_rejections_total = Counter(
    "seat_activation_rejections_total",
    "Activation requests refused by the seat engine",
    ["reason"],
)

seat_deactivations_total = Counter(
    "seat_deactivations_total",
    "Seats released",
    ["brand_id", "kind"],
)

# Cache metrics
cache_requests_total = Counter(
    "cache_requests_total",
    "Cache lookups by outcome",
    ["namespace", "outcome"],
)

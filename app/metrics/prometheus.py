# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics. Single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "rota_requests_total",
    "Total HTTP requests to the rota service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "rota_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "rota_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)
ACCESS_DENIED = Counter(
    "rota_access_denied_total",
    "Requests rejected by the access gate",
)

# ── Business Metrics (updated by service layer only) ──
SCHEDULE_BUILDS = Counter(
    "rota_schedule_builds_total",
    "Total schedule materializations",
)
SCHEDULE_BUILD_SECONDS = Histogram(
    "rota_schedule_build_duration_seconds",
    "Time spent materializing the schedule",
)
OVERRIDES_SET = Counter(
    "rota_overrides_set_total",
    "Total manual overrides set",
)
SWAP_REQUESTS = Counter(
    "rota_swap_requests_total",
    "Swap requests by resulting status",
    ["status"],
)
MALFORMED_RECORDS = Gauge(
    "rota_malformed_records",
    "Stored records skipped by the most recent resolution, by kind",
    ["kind"],
)
STORE_FALLBACKS = Counter(
    "rota_store_fallbacks_total",
    "Document store operations served by the local fallback",
    ["operation"],
)
TEAMS_TOTAL = Gauge(
    "rota_teams",
    "Number of configured teams",
)
OVERRIDES_ACTIVE = Gauge(
    "rota_overrides_active",
    "Number of manual overrides on record",
)
SONGS_TOTAL = Gauge(
    "rota_songs",
    "Number of songs in the library",
)

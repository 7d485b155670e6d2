"""Prometheus metrics for monitoring"""
from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry

registry = CollectorRegistry()

request_count = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'status'],
    registry=registry
)

request_duration = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint'],
    registry=registry
)

quotes_ranked = Counter(
    'quotes_ranked_total',
    'Total quotes scored by the ranking endpoint',
    ['sort_by'],
    registry=registry
)

rate_violations = Counter(
    'minimum_rate_violations_total',
    'Total staffing roles quoted below the minimum hourly rate',
    ['role'],
    registry=registry
)

submissions_blocked = Counter(
    'quote_submissions_blocked_total',
    'Total quote submissions rejected for minimum rate violations',
    registry=registry
)

integrity_violations = Counter(
    'attribution_integrity_violations_total',
    'Total provenance/fee policy mismatches detected',
    registry=registry
)

pass_on_transitions = Counter(
    'pass_on_transitions_total',
    'Total pass-on handoff state transitions',
    ['status'],
    registry=registry
)

cache_hits = Counter(
    'cache_hits_total',
    'Total cache hits',
    ['cache'],
    registry=registry
)

cache_misses = Counter(
    'cache_misses_total',
    'Total cache misses',
    ['cache'],
    registry=registry
)

rate_limit_exceeded = Counter(
    'rate_limit_exceeded_total',
    'Total rate limit exceeded events',
    ['company_id'],
    registry=registry
)

webhook_deliveries = Counter(
    'webhook_deliveries_total',
    'Total webhook delivery attempts',
    ['status'],
    registry=registry
)

webhook_duration = Histogram(
    'webhook_delivery_duration_seconds',
    'Webhook delivery duration in seconds',
    ['status'],
    registry=registry
)

redis_connected = Gauge(
    'redis_connected',
    'Redis connection status (1=connected, 0=disconnected)',
    registry=registry
)


def get_metrics_text() -> str:
    """Generate Prometheus metrics in text format"""
    from prometheus_client import generate_latest
    return generate_latest(registry).decode('utf-8')

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi.responses import Response

# Domain metrics
experiences_created = Counter(
    "interviewhub_experiences_created_total",
    "Interview experiences successfully created",
)

experience_create_failures = Counter(
    "interviewhub_experience_create_failures_total",
    "Experience creation transactions rolled back",
)

vote_actions = Counter(
    "interviewhub_vote_actions_total",
    "Vote toggle outcomes",
    ["action"],  # added | removed | updated
)

views_recorded = Counter(
    "interviewhub_views_recorded_total",
    "Experience view tracking outcomes",
    ["status"],  # recorded | duplicate | error
)

# HTTP request metrics (from middleware)
http_requests = Counter(
    "interviewhub_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)

http_request_duration = Histogram(
    "interviewhub_http_request_duration_seconds",
    "HTTP request duration",
    ["method", "path"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


async def metrics_endpoint():
    """FastAPI endpoint handler that returns Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

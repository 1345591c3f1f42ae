"""Prometheus metrics shared across routers, services and workers."""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

request_duration = Histogram(
    "smartagri_request_duration_seconds",
    "HTTP request latency by route",
    ["method", "path"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

observations_created = Counter(
    "smartagri_observations_created_total",
    "Observations persisted",
    ["kind", "source"],
)

source_fallbacks = Counter(
    "smartagri_source_fallbacks_total",
    "External data source failures answered with simulated data",
    ["kind"],
)

realtime_publishes = Counter(
    "smartagri_realtime_publishes_total",
    "Real-time events published",
    ["event", "status"],
)


async def metrics_endpoint() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

PROJECTION_RUNS = Counter(
    "shw_projection_runs_total",
    "Completed projection passes",
    labelnames=("store",),
    registry=REGISTRY,
)

PROJECTION_LATENCY = Histogram(
    "shw_projection_latency_seconds",
    "Duration of a projection pass",
    labelnames=("store",),
    registry=REGISTRY,
)

SLOTS_BY_STATUS = Gauge(
    "shw_slots",
    "Projected slots per resolved status for each bound location",
    labelnames=("network_id", "location_id", "status"),
    registry=REGISTRY,
)

ACTIVE_SUBSCRIPTIONS = Gauge(
    "shw_active_subscriptions",
    "Collaborator streams currently held by stores",
    labelnames=("store",),
    registry=REGISTRY,
)

SOURCE_ERRORS = Counter(
    "shw_source_errors_total",
    "Errors reported by collaborator streams",
    labelnames=("store",),
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "PROJECTION_RUNS",
    "PROJECTION_LATENCY",
    "SLOTS_BY_STATUS",
    "ACTIVE_SUBSCRIPTIONS",
    "SOURCE_ERRORS",
    "metrics_response",
]

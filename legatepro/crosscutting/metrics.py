"""
===============================================================================
FILE: crosscutting/metrics.py
===============================================================================

CRC CARD (Module)
-------------------------------------------------------------------------------
Name:
    Metrics (Prometheus)

Responsibilities:
    - Define the Prometheus metrics of the service in a private registry.
    - Offer small, stable functions to record events and durations.
    - Keep label cardinality low (no user ids, no record ids in paths).
    - Render the /metrics exposition payload.

Collaborators:
    - crosscutting.middleware: request count and latency.
    - application.guards: forbidden / unauthenticated mutation attempts.
    - infrastructure.cache: page cache invalidations.
===============================================================================
"""

from __future__ import annotations

import re

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

_registry = CollectorRegistry()

_requests_total = Counter(
    "legatepro_requests_total",
    "HTTP requests by endpoint, method and status bucket",
    ["endpoint", "method", "status"],
    registry=_registry,
)

_request_latency = Histogram(
    "legatepro_request_latency_seconds",
    "HTTP request latency",
    ["endpoint", "method"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
    registry=_registry,
)

_mutations_denied_total = Counter(
    "legatepro_mutations_denied_total",
    "Guarded mutations rejected before touching the record store",
    ["reason"],
    registry=_registry,
)

_page_invalidations_total = Counter(
    "legatepro_page_invalidations_total",
    "Cached estate views invalidated after a mutation",
    registry=_registry,
)

# Opaque ids in paths (estate ids, record ids) collapse to {id}.
_ID_SEGMENT = re.compile(r"/(?=[A-Za-z0-9_-]*\d)[A-Za-z0-9_-]{2,64}(?=/|$)")


def _normalize_endpoint(path: str) -> str:
    """Replace id-looking path segments with `{id}`."""
    return _ID_SEGMENT.sub("/{id}", path)


def _status_bucket(code: int) -> str:
    return f"{code // 100}xx" if 100 <= code < 600 else "other"


def record_request_metrics(
    *, endpoint: str, method: str, status_code: int, latency_seconds: float
) -> None:
    labels = {"endpoint": _normalize_endpoint(endpoint), "method": method}
    _requests_total.labels(status=_status_bucket(status_code), **labels).inc()
    _request_latency.labels(**labels).observe(latency_seconds)


def record_mutation_denied(reason: str) -> None:
    _mutations_denied_total.labels(reason=reason).inc()


def record_page_invalidation(count: int = 1) -> None:
    _page_invalidations_total.inc(count)


def get_metrics_response() -> tuple[bytes, str]:
    """Return (payload, content_type) for the /metrics endpoint."""
    return generate_latest(_registry), CONTENT_TYPE_LATEST

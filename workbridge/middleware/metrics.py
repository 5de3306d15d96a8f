"""
Prometheus Metrics

HTTP traffic plus the two things worth watching in the matching engine:
how long a ranking pass takes, and how many domain errors each route emits.

    workbridge_http_request_duration_seconds{method, route, status}
    workbridge_http_requests_in_flight{method, route}
    workbridge_ranking_duration_seconds{kind}
    workbridge_candidates_scored_total{kind}
    workbridge_domain_errors_total{error}

`kind` is one of "workers" (matches for a job), "applicants" or "jobs"
(recommendations for a worker).

Usage:
    app = FastAPI()
    setup_metrics(app)   # adds the middleware and GET /metrics
"""

import logging
import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

logger = logging.getLogger(__name__)

UNTRACKED_PATHS = {"/metrics", "/health"}

REQUEST_DURATION = Histogram(
    "workbridge_http_request_duration_seconds",
    "HTTP request duration by route template",
    ["method", "route", "status"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

REQUESTS_IN_FLIGHT = Gauge(
    "workbridge_http_requests_in_flight",
    "Requests currently being served",
    ["method", "route"]
)

RANKING_DURATION = Histogram(
    "workbridge_ranking_duration_seconds",
    "Time to score and order one candidate set",
    ["kind"],
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25]
)

CANDIDATES_SCORED = Counter(
    "workbridge_candidates_scored_total",
    "Pairs passed through the scorer",
    ["kind"]
)

DOMAIN_ERRORS = Counter(
    "workbridge_domain_errors_total",
    "Domain errors returned to callers, by class",
    ["error"]
)


def route_template(request: Request) -> str:
    """/jobs/{job_id}/matches rather than the concrete path, to bound label cardinality."""
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", request.url.path)
    return "unmatched"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Times every tracked request and counts it by final status."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in UNTRACKED_PATHS:
            return await call_next(request)

        method = request.method
        route = route_template(request)
        in_flight = REQUESTS_IN_FLIGHT.labels(method=method, route=route)
        in_flight.inc()
        started = time.perf_counter()
        status = "500"

        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        except Exception as e:
            logger.error(f"Unhandled error on {method} {route}: {e}")
            raise
        finally:
            in_flight.dec()
            REQUEST_DURATION.labels(method=method, route=route, status=status).observe(
                time.perf_counter() - started
            )


def metrics_endpoint(request: Request) -> Response:
    return PlainTextResponse(content=generate_latest(REGISTRY), media_type=CONTENT_TYPE_LATEST)


def setup_metrics(app: FastAPI) -> None:
    app.add_middleware(PrometheusMiddleware)
    app.add_route("/metrics", metrics_endpoint, methods=["GET"])
    logger.info("Prometheus metrics enabled at /metrics")


def record_ranking(kind: str, duration: float, candidates: int) -> None:
    RANKING_DURATION.labels(kind=kind).observe(duration)
    CANDIDATES_SCORED.labels(kind=kind).inc(candidates)


def record_domain_error(error: Exception) -> None:
    DOMAIN_ERRORS.labels(error=type(error).__name__).inc()

"""
Middleware Package

Prometheus request metrics plus matching-engine counters.
"""

from workbridge.middleware.metrics import (
    PrometheusMiddleware,
    setup_metrics,
    record_ranking,
    record_domain_error,
    REQUEST_DURATION,
    REQUESTS_IN_FLIGHT,
    RANKING_DURATION,
    CANDIDATES_SCORED,
    DOMAIN_ERRORS,
)

__all__ = [
    "PrometheusMiddleware",
    "setup_metrics",
    "record_ranking",
    "record_domain_error",
    "REQUEST_DURATION",
    "REQUESTS_IN_FLIGHT",
    "RANKING_DURATION",
    "CANDIDATES_SCORED",
    "DOMAIN_ERRORS",
]

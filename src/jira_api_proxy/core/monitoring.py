"""Monitoring and metrics collection.

This module provides Prometheus metrics for relayed requests.
"""

from typing import Optional, Union

from prometheus_client import Counter, Histogram, Info
import structlog

logger = structlog.get_logger(__name__)

proxy_requests = Counter(
    "jira_proxy_requests_total",
    "Total number of relayed requests",
    ["kind", "status"]
)

proxy_duration = Histogram(
    "jira_proxy_request_duration_seconds",
    "Relayed request duration in seconds",
    ["kind"]
)

app_info = Info(
    "jira_proxy_app",
    "Application information"
)


def setup_monitoring(name: str, version: str) -> None:
    """Setup monitoring and metrics collection.

    Args:
        name: Application name.
        version: Application version.
    """
    logger.info("Setting up monitoring")
    app_info.info({"version": version, "name": name})


def track_proxy_request(
    kind: str,
    status: Union[int, str],
    duration: Optional[float] = None,
) -> None:
    """Track relayed request metrics.

    Args:
        kind: Remote endpoint family, ``api`` or ``auth``.
        status: Response status code, or ``error`` for transport failures.
        duration: Request duration in seconds.
    """
    proxy_requests.labels(kind=kind, status=str(status)).inc()

    if duration is not None:
        proxy_duration.labels(kind=kind).observe(duration)

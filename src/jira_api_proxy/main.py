"""FastAPI application factory.

Sets up a FastAPI application that relays everything under the
configured mount path to Jira. Run it with
``uvicorn jira_api_proxy.main:create_app --factory``.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
import structlog

from .core.config import Settings, get_settings
from .core.exceptions import ProxyError
from .core.logging import setup_logging
from .core.middleware import CorrelationIDMiddleware
from .core.monitoring import setup_monitoring
from .models.common import ErrorResponse, HealthResponse
from .proxy.registry import JiraApiProxyRegistry
from .proxy.router import TokenResolver, create_proxy_router
from .proxy.transport import HttpxTransport, Transport

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    token_resolver: Optional[TokenResolver] = None,
    transport: Optional[Transport] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Application settings. Defaults to ``get_settings()``.
        token_resolver: Resolves the caller's Jira token from a request.
        transport: Outbound transport shared by all proxies.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "Starting Jira API proxy",
            version=settings.app_version,
            service_url=settings.service_url,
            mount_path=settings.mount_path,
        )
        if settings.metrics_enabled:
            setup_monitoring(settings.app_name, settings.app_version)
        yield
        logger.info("Shutting down Jira API proxy")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Relays requests to the Jira REST API",
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None,
    )

    app.add_middleware(CorrelationIDMiddleware)
    add_exception_handlers(app)

    @app.get("/health", tags=["health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=settings.app_version)

    if settings.metrics_enabled:
        app.mount("/metrics", make_asgi_app())

    registry = JiraApiProxyRegistry(
        settings.service_url,
        settings.mount_path,
        settings.api_version,
        settings.auth_version,
        config=settings.proxy,
        transport=transport or HttpxTransport(timeout=settings.transport_timeout),
    )
    app.state.registry = registry
    app.include_router(
        create_proxy_router(registry, token_resolver),
        prefix=settings.mount_path.rstrip("/"),
        tags=["proxy"],
    )

    return app


def _error_response(
    request: Request,
    status_code: int,
    detail: str,
    error_type: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    content = ErrorResponse(
        detail=detail,
        type=error_type,
        details=details,
        correlation_id=getattr(request.state, "correlation_id", None),
    )
    return JSONResponse(status_code=status_code, content=content.model_dump(exclude_none=True))


def add_exception_handlers(app: FastAPI) -> None:
    """Add global exception handlers to the FastAPI app.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
        logger.error(
            "Proxy error",
            error=str(exc),
            path=request.url.path,
            target_url=exc.target_url,
            method=exc.method,
        )
        return _error_response(
            request, status.HTTP_502_BAD_GATEWAY, "Jira is unreachable", "proxy_error",
            details=exc.details,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception", error=str(exc), path=request.url.path)
        return _error_response(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "internal_error"
        )

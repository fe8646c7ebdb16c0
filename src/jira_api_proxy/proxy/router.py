"""FastAPI router relaying requests through a proxy registry."""

from typing import Callable, Optional

from fastapi import APIRouter, Request, Response
import structlog

from ..core.exceptions import ProxyError
from ..models.auth import UserToken
from ..models.proxy import InboundRequest
from .registry import JiraApiProxyRegistry

logger = structlog.get_logger(__name__)

TokenResolver = Callable[[Request], Optional[UserToken]]

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


def _anonymous(request: Request) -> Optional[UserToken]:
    return None


def create_proxy_router(
    registry: JiraApiProxyRegistry,
    token_resolver: Optional[TokenResolver] = None,
) -> APIRouter:
    """Create a catch-all router relaying every request to Jira.

    The router is meant to be included with the registry's mount path as
    prefix, so that inbound paths start with the mount path.

    Args:
        registry: Registry providing a proxy per user token.
        token_resolver: Returns the caller's token, or ``None`` for
            anonymous access. Defaults to anonymous access for everyone.

    Returns:
        APIRouter: Router with a single catch-all route.
    """
    router = APIRouter()
    resolve_token = token_resolver or _anonymous

    @router.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
    async def relay(request: Request, path: str) -> Response:
        proxy = registry.with_token(resolve_token(request))
        inbound = await InboundRequest.from_starlette(request)

        error, response, _ = await proxy.relay(inbound)
        if error is not None:
            raise ProxyError(
                f"Jira request failed: {error}",
                target_url=proxy.proxy_url(inbound.original_url or inbound.url),
                method=inbound.method,
                cause=error,
            )

        return Response(
            content=response.content,
            status_code=response.status_code,
            media_type=response.headers.get("content-type"),
        )

    return router

"""HTTP transport for relayed requests.

A transport is any object with an async ``send(options)`` method that
returns an ``httpx.Response`` or raises ``httpx.RequestError``.
"""

from typing import Optional, Protocol

import httpx
import structlog

from ..models.proxy import OutboundRequest

logger = structlog.get_logger(__name__)


class Transport(Protocol):
    async def send(self, options: OutboundRequest) -> httpx.Response:
        ...


class HttpxTransport:
    """Transport backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout: Request timeout in seconds.
            transport: Low-level httpx transport, e.g. ``httpx.MockTransport``.
        """
        self.timeout = timeout
        self._transport = transport

    async def send(self, options: OutboundRequest) -> httpx.Response:
        """Send one outbound request.

        Args:
            options: Outbound request description.

        Returns:
            httpx.Response: Remote response, whatever its status code.
        """
        kwargs = {"headers": options.headers}
        if options.is_json:
            if options.body is not None:
                kwargs["json"] = options.body
        elif options.body:
            kwargs["content"] = options.body

        async with httpx.AsyncClient(
            verify=options.reject_unauthorized,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            response = await client.request(options.method, options.url, **kwargs)

        logger.debug(
            "Transport response received",
            method=options.method,
            url=options.url,
            status_code=response.status_code,
        )
        return response

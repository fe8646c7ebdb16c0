"""Shared fixtures for the Jira API proxy tests."""

from typing import List, Optional

import httpx
import pytest

from jira_api_proxy.core.config import ProxyConfig
from jira_api_proxy.models.proxy import OutboundRequest


class FakeTransport:
    """Records outbound requests and answers with a canned response or error."""

    def __init__(
        self,
        response: Optional[httpx.Response] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.response = response if response is not None else httpx.Response(200, json={})
        self.error = error
        self.sent: List[OutboundRequest] = []

    async def send(self, options: OutboundRequest) -> httpx.Response:
        self.sent.append(options)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def proxy_config():
    """Proxy configuration with a mixed-case header prefix"""
    return ProxyConfig(
        strict_ssl=True,
        headers_preset={"Accept": "application/json"},
        proxy_header_prefix="X-Prefix-",
        remote_api_path="/rest/api/",
        remote_auth_path="/rest/auth/",
        auth_resources=["/session", "/websudo"],
    )


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def jira_token():
    return {"name": "JSESSIONID", "value": "6E3487971234567896704A9EB4AE501F"}


@pytest.fixture
def transport_factory():
    return FakeTransport

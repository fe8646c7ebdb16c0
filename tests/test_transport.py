"""
Unit Tests for HttpxTransport
=============================

Run tests:
----------
    pytest tests/test_transport.py -v
"""

import json

import httpx
import pytest

from jira_api_proxy.models.proxy import OutboundRequest
from jira_api_proxy.proxy.transport import HttpxTransport


@pytest.fixture
def captured():
    return []


@pytest.fixture
def transport(captured):
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"ok": True})

    return HttpxTransport(timeout=5, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_json_body_is_serialized(transport, captured):
    options = OutboundRequest(
        url="https://jira.test/rest/api/2/issue",
        method="POST",
        headers={"Accept": "application/json"},
        body={"fields": {"summary": "Broken build"}},
        is_json=True,
    )

    response = await transport.send(options)

    request = captured[0]
    assert response.status_code == 200
    assert request.method == "POST"
    assert str(request.url) == "https://jira.test/rest/api/2/issue"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"fields": {"summary": "Broken build"}}


@pytest.mark.asyncio
async def test_form_body_is_sent_verbatim(transport, captured):
    options = OutboundRequest(
        url="https://jira.test/rest/auth/1/session",
        method="POST",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        body="username=admin&password=secret",
    )

    await transport.send(options)

    assert captured[0].content == b"username=admin&password=secret"


@pytest.mark.asyncio
async def test_empty_body_is_not_sent(transport, captured):
    await transport.send(OutboundRequest(url="https://jira.test/rest/api/2/myself", method="GET", body=""))

    assert captured[0].content == b""


@pytest.mark.asyncio
async def test_transport_errors_propagate():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    transport = HttpxTransport(transport=httpx.MockTransport(handler))

    with pytest.raises(httpx.ConnectError):
        await transport.send(OutboundRequest(url="https://jira.test/rest/api/2/myself", method="GET"))

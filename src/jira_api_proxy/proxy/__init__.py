"""Proxy module.

This module rewrites inbound requests into Jira REST calls and keeps
one proxy per user token.
"""

from .proxy import JiraApiProxy
from .registry import JiraApiProxyRegistry
from .router import create_proxy_router
from .transport import HttpxTransport, Transport

__all__ = [
    "JiraApiProxy",
    "JiraApiProxyRegistry",
    "HttpxTransport",
    "Transport",
    "create_proxy_router",
]

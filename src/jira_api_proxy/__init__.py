"""Jira API proxy.

Relays requests received under a mount path to a Jira instance, with
one proxy per user session token.
"""

from .core.config import ProxyConfig, Settings, get_settings, load_settings
from .models import InboundRequest, OutboundRequest, RelayResult, UserToken
from .proxy import HttpxTransport, JiraApiProxy, JiraApiProxyRegistry, create_proxy_router

__all__ = [
    "HttpxTransport",
    "InboundRequest",
    "JiraApiProxy",
    "JiraApiProxyRegistry",
    "OutboundRequest",
    "ProxyConfig",
    "RelayResult",
    "Settings",
    "UserToken",
    "create_proxy_router",
    "get_settings",
    "load_settings",
]

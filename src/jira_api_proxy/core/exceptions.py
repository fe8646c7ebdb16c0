"""Exceptions raised by the Jira API proxy.

The proxy core never raises for a failed relay; it hands the transport
error to the caller. These exceptions are raised at the edges: when
settings are loaded and when the host adapter turns a delivered
transport error into an HTTP response.
"""

from typing import Any, Dict, Optional


class JiraProxyError(Exception):
    """Base exception for the Jira API proxy."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details})"


class ConfigurationError(JiraProxyError):
    """Settings are missing, unreadable or invalid.

    Raised once, while the application starts.
    """


class ProxyError(JiraProxyError):
    """A relayed request never got a response from Jira.

    Attributes:
        target_url: Remote URL the request was sent to.
        method: HTTP method of the relayed request.
        cause: Transport error delivered by the proxy.
    """

    def __init__(self, message: str, target_url: str, method: str, cause: Exception) -> None:
        super().__init__(message, details={"target_url": target_url, "method": method})
        self.target_url = target_url
        self.method = method
        self.cause = cause

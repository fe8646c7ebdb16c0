"""Jira API proxy registry.

Keeps one ``JiraApiProxy`` per distinct user token plus a single
anonymous proxy.
"""

import threading
from typing import Any, Dict, Mapping, Optional, Union

import structlog

from ..core.config import ProxyConfig
from ..models.auth import UserToken, token_key
from .proxy import JiraApiProxy
from .transport import Transport

logger = structlog.get_logger(__name__)

TokenLike = Union[UserToken, Mapping[str, Any]]


class JiraApiProxyRegistry:
    """Registry of proxies keyed by user token.

    Takes the same arguments as ``JiraApiProxy``; every proxy it creates
    shares them.
    """

    def __init__(
        self,
        service_url: str,
        mount_path: str,
        api_version: Optional[str] = "latest",
        auth_version: Optional[str] = "latest",
        *,
        config: Optional[ProxyConfig] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        self.service_url = service_url
        self.mount_path = mount_path
        self.api_version = api_version
        self.auth_version = auth_version
        self.config = config or ProxyConfig()
        self.transport = transport

        self._anonymous: Optional[JiraApiProxy] = None
        self._proxies: Dict[str, JiraApiProxy] = {}
        self._lock = threading.RLock()

    def _create_proxy(self) -> JiraApiProxy:
        return JiraApiProxy(
            self.service_url,
            self.mount_path,
            self.api_version,
            self.auth_version,
            config=self.config,
            transport=self.transport,
        )

    def _create_authorized_proxy(self, token: UserToken) -> JiraApiProxy:
        proxy = self._create_proxy()
        proxy.set_user_token(token)
        return proxy

    def anonymous(self) -> JiraApiProxy:
        """Return the proxy without a user token, creating it on first use."""
        with self._lock:
            if self._anonymous is None:
                self._anonymous = self._create_proxy()
                logger.debug("Created anonymous proxy", mount_path=self.mount_path)
            return self._anonymous

    def register_token(self, token: TokenLike) -> None:
        """Create a proxy for ``token`` unless one already exists."""
        token = UserToken.coerce(token)
        key = token_key(token)
        with self._lock:
            if key not in self._proxies:
                self._proxies[key] = self._create_authorized_proxy(token)
                logger.debug("Registered token proxy", token_name=token.name, proxies=len(self._proxies))

    def with_token(self, token: Optional[TokenLike]) -> JiraApiProxy:
        """Return the proxy for ``token``, or the anonymous one without a token."""
        if not token:
            return self.anonymous()
        token = UserToken.coerce(token)
        key = token_key(token)
        with self._lock:
            self.register_token(token)
            return self._proxies[key]

    def drop_token(self, token: TokenLike) -> None:
        """Forget the proxy for ``token``. Unknown tokens are ignored."""
        key = token_key(token)
        with self._lock:
            if self._proxies.pop(key, None) is not None:
                logger.debug("Dropped token proxy", proxies=len(self._proxies))

    def __contains__(self, token: Any) -> bool:
        if not token:
            return False
        with self._lock:
            return token_key(token) in self._proxies

    def __len__(self) -> int:
        with self._lock:
            return len(self._proxies)

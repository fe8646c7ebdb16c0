"""Jira API proxy.

Rewrites inbound requests received under a mount path into requests
against the remote Jira REST and auth endpoints, and relays them with
the user's session cookie attached.
"""

import inspect
import time
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union
from urllib.parse import unquote, urlencode, urlsplit

import httpx
import structlog

from ..core.config import ProxyConfig
from ..core.monitoring import track_proxy_request
from ..models.auth import UserToken
from ..models.proxy import InboundRequest, OutboundRequest, RelayResult
from .transport import HttpxTransport, Transport

logger = structlog.get_logger(__name__)

RelayCallback = Callable[[Optional[Exception], Optional[httpx.Response], Any], Union[None, Awaitable[None]]]


class JiraApiProxy:
    """Proxy to one Jira instance for one identity.

    Args:
        service_url: Jira base URL. Only scheme, host and port are used.
        mount_path: Path the proxy is mounted under. It is cut off from
            inbound request URLs.
        api_version: API version. Defaults to ``latest``.
        auth_version: Auth version. Defaults to ``latest``.
        config: Proxy configuration. Defaults to ``ProxyConfig()``.
        transport: Object with an async ``send(options)`` method.
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
        parts = urlsplit(service_url)
        self._scheme = parts.scheme
        self._hostname = parts.hostname or ""
        self._port = parts.port
        self._mount_path = mount_path
        self._api_version = api_version or "latest"
        self._auth_version = auth_version or "latest"

        self.config = config or ProxyConfig()
        self.transport = transport or HttpxTransport()
        self.strict_ssl = self.config.strict_ssl
        self._user_token: Optional[UserToken] = None

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def hostname(self) -> str:
        return self._hostname

    @property
    def port(self) -> Optional[int]:
        return self._port

    @property
    def mount_path(self) -> str:
        return self._mount_path

    @property
    def api_version(self) -> str:
        return self._api_version

    @property
    def auth_version(self) -> str:
        return self._auth_version

    def set_strict_ssl(self, strict_ssl: Any) -> None:
        self.strict_ssl = bool(strict_ssl)

    def set_user_token(self, token: Union[UserToken, Mapping[str, Any], None]) -> None:
        self._user_token = UserToken.coerce(token) if token else None

    def get_user_token(self) -> Optional[UserToken]:
        return self._user_token

    def get_headers_preset(self) -> Dict[str, str]:
        """Default outbound headers, copied so callers can mutate them."""
        return dict(self.config.headers_preset)

    def proxy_headers(self, original_headers: Mapping[str, str]) -> Dict[str, str]:
        """Build outbound headers from the preset and prefixed inbound headers.

        Inbound headers starting with the configured prefix are forwarded
        with the prefix removed; all others are dropped.
        """
        prefix = self.config.proxy_header_prefix
        headers = self.get_headers_preset()
        for key, value in original_headers.items():
            if key.startswith(prefix):
                headers[key[len(prefix):]] = value
        return headers

    def proxy_params(self, original_params: Any) -> Any:
        return original_params

    def proxy_method(self, original_method: str) -> str:
        return original_method

    def get_relative_url(self, original_url: str) -> str:
        """Remove the first occurrence of the mount path from ``original_url``."""
        return original_url.replace(self._mount_path, "", 1)

    def is_auth_request(self, relative_url: str) -> bool:
        return any(relative_url.startswith(resource) for resource in self.config.auth_resources)

    def proxy_url(self, original_url: str) -> str:
        """Translate an inbound URL into the absolute remote URL.

        Auth resources go to the auth path suffixed with the API version,
        everything else to the API path suffixed with the auth version.
        The assembled URL is percent-decoded once.
        """
        relative_url = self.get_relative_url(original_url)
        if self.is_auth_request(relative_url):
            remote_path = self.config.remote_auth_path + self._api_version
        else:
            remote_path = self.config.remote_api_path + self._auth_version

        host = self._hostname
        if ":" in host:
            host = f"[{host}]"
        if self._port is not None:
            host = f"{host}:{self._port}"

        path = remote_path + relative_url
        if not path.startswith("/"):
            path = "/" + path

        return unquote(f"{self._scheme}://{host}{path}")

    def authorize_request(self, options: OutboundRequest) -> None:
        token = self.get_user_token()
        if token:
            options.headers["cookie"] = token.cookie

    async def relay(
        self,
        request: InboundRequest,
        callback: Optional[RelayCallback] = None,
    ) -> RelayResult:
        """Relay an inbound request to Jira.

        Args:
            request: Inbound request description.
            callback: Called with ``(error, response, body)`` on completion.

        Returns:
            RelayResult: The same values passed to ``callback``.
        """
        options = OutboundRequest(
            url=self.proxy_url(request.original_url or request.url),
            method=self.proxy_method(request.method),
            headers=self.proxy_headers(request.headers or {}),
        )

        if request.is_json():
            options.is_json = True
            options.body = self.proxy_params(request.body)
        else:
            options.body = urlencode(self.proxy_params(request.params) or {}, doseq=True)

        return await self.request(options, callback)

    async def request(
        self,
        options: OutboundRequest,
        callback: Optional[RelayCallback] = None,
    ) -> RelayResult:
        """Send an outbound request through the transport.

        Applies the TLS policy and the user's session cookie. Transport
        errors are delivered as ``error`` unchanged; any HTTP status is a
        successful delivery.
        """
        options.reject_unauthorized = self.strict_ssl
        self.authorize_request(options)

        kind = "auth" if urlsplit(options.url).path.startswith(self.config.remote_auth_path) else "api"
        log = logger.bind(method=options.method, url=options.url, kind=kind)
        log.info(
            "Requesting",
            headers=options.headers,
            is_json=options.is_json,
            reject_unauthorized=options.reject_unauthorized,
        )

        start_time = time.time()
        error: Optional[Exception] = None
        response: Optional[httpx.Response] = None
        body: Any = None
        try:
            response = await self.transport.send(options)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            error = e
        duration = time.time() - start_time

        if error is not None:
            log.warning("Request failed", error=str(error), error_type=type(error).__name__)
            track_proxy_request(kind, "error", duration)
        else:
            body = _response_body(options, response)
            log.info(
                "Request completed",
                status_code=response.status_code,
                duration=f"{duration:.4f}s",
            )
            log.debug("Response body", body=body)
            track_proxy_request(kind, response.status_code, duration)

        result = RelayResult(error, response, body)
        if callback is not None:
            outcome = callback(*result)
            if inspect.isawaitable(outcome):
                await outcome
        return result

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}({self._scheme}://{self._hostname}, "
            f"mount_path={self._mount_path!r}, authorized={self._user_token is not None})"
        )

def _response_body(options: OutboundRequest, response: httpx.Response) -> Any:
    if options.is_json and response.content:
        try:
            return response.json()
        except ValueError:
            pass
    return response.text

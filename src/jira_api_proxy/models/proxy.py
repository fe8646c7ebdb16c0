"""Proxy-related data models.

This module contains the inbound and outbound request descriptions a
proxy works with, and the result it delivers.
"""

from typing import Any, Dict, List, NamedTuple, Optional, Union

import httpx
from pydantic import Field
from starlette.datastructures import UploadFile
from starlette.requests import Request

from .common import BaseModel

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _media_type(content_type: Optional[str]) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


class InboundRequest(BaseModel):
    """Request received by the host application, as seen by a proxy."""

    original_url: Optional[str] = Field(None, description="Full path as received, mount path included")
    url: str = Field(default="/", description="Request path, used when original_url is absent")
    method: str = Field(default="GET", description="HTTP method")
    headers: Optional[Dict[str, str]] = Field(None, description="Request headers")
    content_type: Optional[str] = Field(None, description="Declared body content type")
    body: Any = Field(None, description="Parsed JSON body")
    params: Optional[Dict[str, Union[str, List[str]]]] = Field(None, description="Form parameters")

    def is_json(self) -> bool:
        """Whether the request declares a JSON body.

        Matches ``application/json`` and any ``+json`` structured suffix.
        """
        content_type = self.content_type
        if content_type is None and self.headers:
            content_type = next(
                (value for key, value in self.headers.items() if key.lower() == "content-type"),
                None,
            )
        media_type = _media_type(content_type)
        return media_type == "application/json" or media_type.endswith("+json")

    @classmethod
    async def from_starlette(cls, request: Request) -> "InboundRequest":
        """Build an inbound request from a Starlette/FastAPI request."""
        # raw_path keeps percent-escapes; the proxy decodes the URL exactly once
        raw_path = request.scope.get("raw_path")
        original_url = raw_path.split(b"?", 1)[0].decode("latin-1") if raw_path else request.url.path
        if request.url.query:
            original_url = f"{original_url}?{request.url.query}"

        inbound = cls(
            original_url=original_url,
            url=request.url.path,
            method=request.method,
            headers=dict(request.headers),
            content_type=request.headers.get("content-type"),
        )

        if inbound.is_json():
            raw = await request.body()
            if raw:
                try:
                    inbound.body = await request.json()
                except ValueError:
                    inbound.body = raw.decode("utf-8", errors="replace")
        elif _media_type(inbound.content_type) in FORM_CONTENT_TYPES:
            params: Dict[str, Union[str, List[str]]] = {}
            form = await request.form()
            for key, value in form.multi_items():
                if isinstance(value, UploadFile):
                    continue
                if key in params:
                    existing = params[key]
                    params[key] = (existing if isinstance(existing, list) else [existing]) + [value]
                else:
                    params[key] = value
            inbound.params = params

        return inbound


class OutboundRequest(BaseModel):
    """Request description handed to the transport."""

    url: str = Field(..., description="Absolute remote URL")
    method: str = Field(..., description="HTTP method")
    headers: Dict[str, str] = Field(default_factory=dict, description="Request headers")
    body: Any = Field(None, description="Form-encoded string or JSON-serializable value")
    is_json: bool = Field(default=False, description="Serialize body as JSON")
    reject_unauthorized: bool = Field(default=True, description="Verify remote TLS certificates")


class RelayResult(NamedTuple):
    """Outcome of a relayed request, in callback argument order."""

    error: Optional[Exception]
    response: Optional[httpx.Response]
    body: Any

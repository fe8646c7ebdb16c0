"""Pydantic models for the application.

This module contains all data models used throughout the application
for request/response validation and serialization.
"""

from .auth import UserToken, token_key
from .proxy import InboundRequest, OutboundRequest, RelayResult
from .common import BaseModel, ErrorResponse, HealthResponse

__all__ = [
    # Auth models
    "UserToken",
    "token_key",
    # Proxy models
    "InboundRequest",
    "OutboundRequest",
    "RelayResult",
    # Common models
    "BaseModel",
    "ErrorResponse",
    "HealthResponse",
]

"""Authentication-related data models."""

from typing import Any, Mapping, Union
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field


class UserToken(BaseModel):
    """Session token issued by the remote service for one user.

    Only ``name`` and ``value`` are used to authorize requests; any extra
    fields are kept and take part in the token's identity.
    """

    model_config = ConfigDict(frozen=True, extra="allow", coerce_numbers_to_str=True)

    name: str = Field(..., description="Session cookie name")
    value: str = Field(..., description="Session cookie value")

    @property
    def cookie(self) -> str:
        """Cookie header value for this token."""
        return f"{self.name}={self.value}"

    @classmethod
    def coerce(cls, token: Union["UserToken", Mapping[str, Any]]) -> "UserToken":
        """Return ``token`` as a ``UserToken``, validating plain mappings."""
        if isinstance(token, cls):
            return token
        return cls.model_validate(dict(token))


def token_key(token: Union[UserToken, Mapping[str, Any]]) -> str:
    """Deterministic registry key for a token.

    The key is the form-urlencoded serialization of every field:
    ``name`` and ``value`` first, then extra fields in insertion order.
    Extra fields given in another order form a different key.
    """
    return urlencode(UserToken.coerce(token).model_dump(), doseq=True)

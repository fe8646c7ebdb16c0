"""Application configuration management.

This module provides configuration management using Pydantic settings
with environment variable and JSON file support.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class ProxyConfig(BaseModel):
    """Proxy behaviour shared by every proxy instance.

    Loaded once at process start and never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    strict_ssl: bool = Field(default=True, description="Reject invalid remote certificates")
    headers_preset: Dict[str, str] = Field(
        default_factory=lambda: {
            "Accept": "application/json",
            "X-Atlassian-Token": "no-check",
        },
        description="Headers merged into every outbound request",
    )
    proxy_header_prefix: str = Field(
        default="x-jira-proxy-",
        description="Inbound headers with this prefix are forwarded without it",
    )
    remote_api_path: str = Field(default="/rest/api/", description="Remote API path prefix")
    remote_auth_path: str = Field(default="/rest/auth/", description="Remote auth path prefix")
    auth_resources: List[str] = Field(
        default_factory=lambda: ["/session"],
        description="Relative path prefixes routed to the auth endpoints",
    )

    @field_validator("auth_resources", mode="before")
    @classmethod
    def parse_auth_resources(cls, v):
        """Parse auth resources from string or list."""
        if isinstance(v, str):
            return [resource.strip() for resource in v.split(",") if resource.strip()]
        return v

    @field_validator("proxy_header_prefix")
    @classmethod
    def validate_header_prefix(cls, v):
        """Reject an empty prefix, which would forward every header."""
        if not v:
            raise ValueError("Proxy header prefix must not be empty")
        return v


class Settings(BaseSettings):
    """Application settings.

    All settings can be overridden using environment variables prefixed
    with ``JIRA_PROXY_``; nested proxy options use ``__`` as delimiter.
    """

    model_config = SettingsConfigDict(
        env_prefix="JIRA_PROXY_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        frozen=True,
    )

    # Application settings
    app_name: str = Field(default="Jira API Proxy", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment (development, staging, production)")

    # Remote service settings
    service_url: str = Field(default="http://localhost:8080", description="Jira base URL")
    mount_path: str = Field(default="/jira", description="Path the proxy is mounted under")
    api_version: str = Field(default="latest", description="Remote API version")
    auth_version: str = Field(default="latest", description="Remote auth version")
    transport_timeout: float = Field(default=30.0, description="Outbound request timeout in seconds")

    proxy: ProxyConfig = Field(default_factory=ProxyConfig, description="Proxy behaviour")

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")
    log_file: Optional[str] = Field(default=None, description="Log file path")
    log_max_size: str = Field(default="10MB", description="Maximum log file size")
    log_backup_count: int = Field(default=5, description="Number of backup log files")

    # Monitoring settings
    metrics_enabled: bool = Field(default=True, description="Enable Prometheus metrics")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment value."""
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of {allowed}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        allowed = ["json", "text"]
        if v not in allowed:
            raise ValueError(f"Log format must be one of {allowed}")
        return v

    @field_validator("service_url")
    @classmethod
    def validate_service_url(cls, v):
        """Require an absolute http(s) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Service URL must start with http:// or https://")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


def load_settings(path: Union[str, Path, None] = None) -> Settings:
    """Load settings, optionally from a JSON file.

    Values from the file take precedence over environment variables.

    Args:
        path: Path to a JSON configuration file.

    Returns:
        Settings: Validated settings.

    Raises:
        ConfigurationError: If the file cannot be read or the values are invalid.
    """
    data = {}
    if path is not None:
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigurationError(
                f"Cannot read configuration file: {path}",
                details={"path": str(path)},
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration file must contain a JSON object",
                details={"path": str(path)},
            )

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid configuration",
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return load_settings()

"""Logging setup for the Jira API proxy.

Log records go through structlog and end up on stdout (and optionally a
rotating file) as JSON or console text. Header maps attached to an
event under ``headers`` have their credentials masked before rendering,
so relayed session cookies and basic-auth values never reach the logs.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping

import structlog

from .config import Settings

REDACTED = "[redacted]"
REDACTED_HEADERS = frozenset({"authorization", "cookie", "set-cookie", "proxy-authorization"})

_SIZE_UNITS = {"KB": 1024, "MB": 1024 ** 2, "GB": 1024 ** 3}


def redact_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """Return a copy of ``headers`` with credential values masked."""
    return {
        name: REDACTED if name.lower() in REDACTED_HEADERS else value
        for name, value in headers.items()
    }


def redact_secrets(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """structlog processor masking credentials in a ``headers`` field."""
    headers = event_dict.get("headers")
    if isinstance(headers, Mapping):
        event_dict["headers"] = redact_headers(headers)
    return event_dict


def setup_logging(settings: Settings) -> None:
    """Configure stdlib logging and structlog from settings.

    Args:
        settings: Application settings.
    """
    level = getattr(logging, settings.log_level)

    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=log_path,
                maxBytes=_parse_size(settings.log_max_size),
                backupCount=settings.log_backup_count,
                encoding="utf-8",
            )
        )

    logging.basicConfig(format="%(message)s", level=level, handlers=handlers, force=True)
    # httpx logs every outbound request line at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.log_format == "json":
        processors.extend([
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.extend([
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _parse_size(size: str) -> int:
    """Parse a size such as '10MB' or '512kb' into bytes."""
    size = size.upper().strip()
    for suffix, factor in _SIZE_UNITS.items():
        if size.endswith(suffix):
            return int(size[: -len(suffix)]) * factor
    return int(size)


def bind_context(**kwargs: Any) -> None:
    """Bind key-value pairs to the current logging context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()

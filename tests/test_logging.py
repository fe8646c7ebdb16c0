"""
Unit Tests for logging setup
============================

Test Coverage:
--------------
1. Credential headers are masked before rendering
2. Log file size parsing
3. setup_logging installs the masking processor

Run tests:
----------
    pytest tests/test_logging.py -v
"""

import pytest
import structlog

from jira_api_proxy.core.config import Settings
from jira_api_proxy.core.logging import (
    REDACTED,
    _parse_size,
    redact_headers,
    redact_secrets,
    setup_logging,
)


@pytest.fixture
def reset_structlog():
    yield
    structlog.reset_defaults()


def test_redact_headers_masks_credentials_case_insensitively():
    headers = {"Cookie": "JSESSIONID=abc", "authorization": "Basic YWRtaW4=", "Accept": "application/json"}

    assert redact_headers(headers) == {
        "Cookie": REDACTED,
        "authorization": REDACTED,
        "Accept": "application/json",
    }


def test_redact_secrets_leaves_outbound_headers_untouched():
    headers = {"cookie": "JSESSIONID=abc"}
    event = {"event": "Requesting", "headers": headers}

    result = redact_secrets(None, "info", event)

    assert result["headers"] == {"cookie": REDACTED}
    assert headers == {"cookie": "JSESSIONID=abc"}


def test_redact_secrets_ignores_events_without_headers():
    event = {"event": "Request completed", "status_code": 200}

    assert redact_secrets(None, "info", dict(event)) == event


@pytest.mark.parametrize(
    "size,expected",
    [("10MB", 10 * 1024 ** 2), ("512kb", 512 * 1024), ("1GB", 1024 ** 3), (" 2048 ", 2048)],
)
def test_parse_size(size, expected):
    assert _parse_size(size) == expected


def test_setup_logging_installs_redaction(reset_structlog):
    setup_logging(Settings(log_format="json", log_level="debug"))

    assert redact_secrets in structlog.get_config()["processors"]

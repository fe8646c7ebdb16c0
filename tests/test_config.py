"""
Unit Tests for configuration loading
====================================

Run tests:
----------
    pytest tests/test_config.py -v
"""

import json
import os

import pytest
from pydantic import ValidationError

from jira_api_proxy.core.config import ProxyConfig, Settings, load_settings
from jira_api_proxy.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep JIRA_PROXY_* variables from the host out of the tests"""
    for key in list(os.environ):
        if key.upper().startswith("JIRA_PROXY_"):
            monkeypatch.delenv(key)


def test_proxy_config_defaults():
    config = ProxyConfig()

    assert config.strict_ssl is True
    assert config.proxy_header_prefix == "x-jira-proxy-"
    assert config.remote_api_path == "/rest/api/"
    assert config.remote_auth_path == "/rest/auth/"
    assert config.auth_resources == ["/session"]
    assert config.headers_preset["Accept"] == "application/json"


def test_proxy_config_is_immutable():
    config = ProxyConfig()

    with pytest.raises(ValidationError):
        config.strict_ssl = False


def test_auth_resources_accept_comma_separated_string():
    config = ProxyConfig(auth_resources="/session, /websudo")

    assert config.auth_resources == ["/session", "/websudo"]


def test_empty_header_prefix_is_rejected():
    with pytest.raises(ValidationError):
        ProxyConfig(proxy_header_prefix="")


def test_load_settings_from_json_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "service_url": "https://jira.example.com",
        "mount_path": "/tracker",
        "api_version": "2",
        "proxy": {
            "strict_ssl": False,
            "headers_preset": {"Accept": "application/json"},
            "auth_resources": ["/session"],
        },
    }))

    settings = load_settings(path)

    assert settings.service_url == "https://jira.example.com"
    assert settings.mount_path == "/tracker"
    assert settings.api_version == "2"
    assert settings.auth_version == "latest"
    assert settings.proxy.strict_ssl is False
    assert settings.proxy.headers_preset == {"Accept": "application/json"}


def test_load_settings_from_environment(monkeypatch):
    monkeypatch.setenv("JIRA_PROXY_MOUNT_PATH", "/issues")
    monkeypatch.setenv("JIRA_PROXY_PROXY__STRICT_SSL", "false")

    settings = load_settings()

    assert settings.mount_path == "/issues"
    assert settings.proxy.strict_ssl is False


def test_missing_file_raises_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(tmp_path / "missing.json")

    assert exc_info.value.details["path"].endswith("missing.json")


def test_malformed_file_raises_configuration_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError):
        load_settings(path)


def test_invalid_values_raise_configuration_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"service_url": "jira.example.com"}))

    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(path)

    assert isinstance(exc_info.value.__cause__, ValidationError)
    assert exc_info.value.details["errors"][0]["loc"] == ("service_url",)


def test_log_level_is_normalized():
    assert Settings(log_level="debug").log_level == "DEBUG"

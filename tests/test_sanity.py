# Redash MCP Server
# File: tests/test_sanity.py
# Version: v3

"""Basic sanity tests for configuration and client construction."""

from importlib.metadata import version

import pytest
from mcp import types
from mcp.server.lowlevel import Server

from redash_mcp import __version__
from redash_mcp.client import RedashClient
from redash_mcp.config import RedashConfig
from redash_mcp.errors import ConfigurationError


def test_version_is_a_string() -> None:
    assert isinstance(__version__, str) and __version__


def test_config_from_env_minimal(monkeypatch) -> None:
    monkeypatch.delenv("REDASH_URL", raising=False)
    monkeypatch.delenv("REDASH_API_KEY", raising=False)
    monkeypatch.delenv("REDASH_TIMEOUT", raising=False)

    config = RedashConfig.from_env()
    assert config.url is None
    assert config.api_key is None
    assert config.timeout_ms == 30000
    assert config.missing == ["REDASH_URL", "REDASH_API_KEY"]


def test_client_requires_url_and_key() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        RedashClient(config=RedashConfig(url="https://redash.test", api_key=None))

    assert "REDASH_API_KEY" in str(excinfo.value)
    assert "REDASH_URL" not in str(excinfo.value)


def test_client_builds_key_header(config) -> None:
    client = RedashClient(config=config)
    headers = client.auth.headers()
    assert headers["Authorization"] == "Key secret-key"
    assert headers["Content-Type"] == "application/json"


def test_installed_mcp_has_low_level_server_api() -> None:
    assert int(version("mcp").split(".")[0]) == 1
    decorators = ("list_tools", "call_tool", "list_resources", "read_resource", "set_logging_level")
    for decorator in decorators:
        assert callable(getattr(Server, decorator))
    assert "inputSchema" in types.Tool.model_fields
    assert "mimeType" in types.Resource.model_fields

# Redash MCP Server
# File: tests/test_config.py
# Version: v1

from __future__ import annotations

import pytest

from redash_mcp.config import RedashConfig
from redash_mcp.errors import ConfigurationError


def test_from_env_reads_all_settings(monkeypatch):
    monkeypatch.setenv("REDASH_URL", " https://redash.example.com/ ")
    monkeypatch.setenv("REDASH_API_KEY", "abc123")
    monkeypatch.setenv("REDASH_TIMEOUT", "12000")
    monkeypatch.setenv("REDASH_LOG_LEVEL", "debug")

    config = RedashConfig.from_env()

    assert config.url == "https://redash.example.com/"
    assert config.base_url == "https://redash.example.com"
    assert config.api_key == "abc123"
    assert config.timeout_ms == 12000
    assert config.timeout_seconds == 12.0
    assert config.log_level == "DEBUG"
    assert config.require() is config


@pytest.mark.parametrize("raw, expected", [("nope", 30000), ("", 30000), ("0", 1), ("9999999", 600000)])
def test_timeout_falls_back_and_clamps(monkeypatch, raw, expected):
    monkeypatch.setenv("REDASH_TIMEOUT", raw)
    assert RedashConfig.from_env().timeout_ms == expected


def test_blank_values_count_as_missing(monkeypatch):
    monkeypatch.setenv("REDASH_URL", "   ")
    monkeypatch.setenv("REDASH_API_KEY", "")

    config = RedashConfig.from_env()

    with pytest.raises(ConfigurationError) as excinfo:
        config.require()
    assert "REDASH_URL, REDASH_API_KEY" in excinfo.value.message

# Redash MCP Server
# File: config.py
# Version: v3

"""Configuration loading for the Redash MCP Server."""

from __future__ import annotations

from dataclasses import dataclass
import os

from .errors import ConfigurationError

DEFAULT_TIMEOUT_MS = 30000
DEFAULT_LOG_LEVEL = "INFO"


def _parse_int_env(
    name: str,
    default: int,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Parse an int environment variable with clamping and safe fallback."""
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        value = int(default)
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            value = int(default)

    if min_value is not None and value < min_value:
        value = min_value
    if max_value is not None and value > max_value:
        value = max_value

    return value


@dataclass
class RedashConfig:
    """Connection settings for a Redash instance.

    ``url`` and ``api_key`` are required before a client can be built;
    ``from_env`` itself never fails so diagnostics can report what is
    missing.
    """

    url: str | None
    api_key: str | None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "RedashConfig":
        """Create configuration from environment variables."""
        url = (os.getenv("REDASH_URL") or "").strip() or None
        api_key = (os.getenv("REDASH_API_KEY") or "").strip() or None

        timeout_ms = _parse_int_env(
            "REDASH_TIMEOUT", default=DEFAULT_TIMEOUT_MS, min_value=1, max_value=600000
        )
        log_level = (os.getenv("REDASH_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper()

        return cls(
            url=url,
            api_key=api_key,
            timeout_ms=timeout_ms,
            log_level=log_level,
        )

    @property
    def missing(self) -> list[str]:
        """Names of required environment variables that are not set."""
        names = []
        if not self.url:
            names.append("REDASH_URL")
        if not self.api_key:
            names.append("REDASH_API_KEY")
        return names

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def base_url(self) -> str:
        return (self.url or "").rstrip("/")

    def require(self) -> "RedashConfig":
        """Return self, or raise ConfigurationError listing missing settings."""
        missing = self.missing
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        return self

# Redash MCP Server
# File: auth.py
# Version: v3

"""API-key authentication for the Redash REST API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from .config import RedashConfig


@dataclass
class ApiKeyAuth:
    """Builds the headers Redash expects on every API call.

    Redash accepts a user or service API key in the ``Authorization``
    header using the ``Key`` scheme.
    """

    config: RedashConfig

    def headers(self) -> Dict[str, str]:
        """Return request headers carrying the configured API key."""
        self.config.require()
        return {
            "Authorization": f"Key {self.config.api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

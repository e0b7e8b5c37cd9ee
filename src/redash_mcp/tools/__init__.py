# Redash MCP Server
# File: tools/__init__.py
# Version: v2

"""MCP tool catalog and dispatch."""

from __future__ import annotations

from .dispatcher import ToolDispatcher, ToolSpec

__all__ = ["ToolDispatcher", "ToolSpec"]

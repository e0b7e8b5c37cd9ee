# Redash MCP Server
# File: __init__.py
# Version: v2

"""Top-level package for the Redash MCP Server."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]


def _resolve_version() -> str:
    """Resolve installed distribution version.

    Uses Python package metadata so __version__ stays aligned with pyproject.toml.
    """
    try:
        return version("redash-mcp")
    except PackageNotFoundError:
        # Running from source tree without installed package metadata.
        return "1.1.0"


__version__ = _resolve_version()

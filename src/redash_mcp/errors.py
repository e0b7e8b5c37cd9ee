# Redash MCP Server
# File: errors.py
# Version: v2

"""Error taxonomy for the Redash MCP server.

Only ``ConfigurationError`` is fatal (at startup). Every other error is
caught at the tool-dispatch or resource-read boundary and turned into an
error-flagged MCP response.
"""

from __future__ import annotations

from typing import Optional

_BODY_PREVIEW_CHARS = 500


class RedashMCPError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def summary(self) -> str:
        """One-line, user-facing description of the failure."""
        return self.message


class ConfigurationError(RedashMCPError):
    """Required connection settings are missing or unusable."""


class ValidationError(RedashMCPError):
    """Tool arguments did not match the declared input schema."""

    def __init__(self, tool: str, message: str) -> None:
        super().__init__(f"Invalid parameters for {tool}: {message}")
        self.tool = tool


class UpstreamError(RedashMCPError):
    """Non-2xx response or network failure talking to Redash.

    ``status_code`` is ``None`` when no HTTP response was received.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def summary(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (HTTP {self.status_code})"

    @property
    def body_preview(self) -> str:
        return (self.body or "")[:_BODY_PREVIEW_CHARS]


class NotFoundError(UpstreamError):
    """Upstream answered 404 for the requested entity."""


class QueryExecutionError(RedashMCPError):
    """A query job finished with the failure status."""

    def __init__(self, job_id: str, error: Optional[str]) -> None:
        super().__init__(f"Query execution failed: {error or 'unknown error'}")
        self.job_id = job_id
        self.error = error


class QueryExecutionTimeout(RedashMCPError):
    """A query job did not reach a terminal status in time."""

    def __init__(self, job_id: str, timeout: float) -> None:
        super().__init__(
            f"Query execution timed out after {int(timeout * 1000)}ms (job {job_id})"
        )
        self.job_id = job_id
        self.timeout = timeout


class InvalidURI(RedashMCPError):
    """A resource URI does not address a query or dashboard."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Invalid resource URI: {uri}")
        self.uri = uri


class UnknownToolError(RedashMCPError):
    """The requested tool name is not in the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name

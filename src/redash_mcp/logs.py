# Redash MCP Server
# File: logs.py
# Version: v3

"""Logging setup for the Redash MCP server.

Log records always go to stderr (stdout carries the MCP protocol). When a
request is being served, records from the ``redash_mcp`` package are also
forwarded to the client as MCP log notifications.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Dict, Set

from mcp import types

PACKAGE_LOGGER = "redash_mcp"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_MCP_TO_PYTHON: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "notice": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "alert": logging.CRITICAL,
    "emergency": logging.CRITICAL,
}


def configure_logging(level: str = "INFO") -> None:
    """Send package logs to stderr at the given level name."""
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(numeric)


def to_mcp_level(levelno: int) -> types.LoggingLevel:
    if levelno >= logging.CRITICAL:
        return "critical"
    if levelno >= logging.ERROR:
        return "error"
    if levelno >= logging.WARNING:
        return "warning"
    if levelno >= logging.INFO:
        return "info"
    return "debug"


def to_python_level(level: str) -> int:
    return _MCP_TO_PYTHON.get(str(level).lower(), logging.INFO)


class McpNotificationHandler(logging.Handler):
    """Forward log records to the MCP client of the current request.

    ``server`` is an ``mcp.server.lowlevel.Server``. Outside a request
    there is no session to notify and records are only written locally.
    """

    def __init__(self, server: Any, level: int = logging.INFO) -> None:
        super().__init__(level=level)
        self.server = server
        self._pending: Set[asyncio.Task] = set()

    def emit(self, record: logging.LogRecord) -> None:
        try:
            session = self.server.request_context.session
        except LookupError:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return

        task = loop.create_task(
            session.send_log_message(
                level=to_mcp_level(record.levelno),
                data=self.format(record),
                logger=record.name,
            )
        )
        self._pending.add(task)

        def _done(t: asyncio.Task) -> None:
            self._pending.discard(t)
            if not t.cancelled() and t.exception() is not None:
                sys.stderr.write(f"Failed to send log notification: {t.exception()}\n")

        task.add_done_callback(_done)


def attach_notification_handler(server: Any, level: int = logging.INFO) -> McpNotificationHandler:
    """Install a notification handler on the package logger and return it."""
    handler = McpNotificationHandler(server, level=level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.getLogger(PACKAGE_LOGGER).addHandler(handler)
    return handler


def set_client_level(level: str) -> int:
    """Apply an MCP ``logging/setLevel`` request to the package logger.

    Notification handlers follow the same level so the client receives
    exactly the records it asked for.
    """
    numeric = to_python_level(level)
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(numeric)
    for handler in package_logger.handlers:
        if isinstance(handler, McpNotificationHandler):
            handler.setLevel(numeric)
    return numeric

# Redash MCP Server
# File: transports/stdio_server.py
# Version: v5

"""STDIO entrypoint for the Redash MCP server.

This is the script behind the ``redash-mcp`` console command.

It:

- loads ``.env`` from the working directory and reads the configuration,
- builds a ``RedashClient`` (exiting with status 1 if settings are missing),
- wires tools and resources onto a low-level MCP ``Server``, and
- serves requests over stdio.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server

from .. import __version__
from ..client import RedashClient
from ..config import RedashConfig
from ..errors import ConfigurationError
from ..logs import attach_notification_handler, configure_logging, set_client_level
from ..resources import RESOURCE_MIME_TYPE, ResourceExposer
from ..tools import ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "redash-mcp"

_USAGE = """\
Please create a .env file in your current directory with the following variables:

REDASH_URL=https://your-redash-instance.com
REDASH_API_KEY=your_api_key

Or provide them in the environment when starting the server."""


def build_server(client: RedashClient) -> Server:
    """Create an MCP server exposing Redash tools and resources."""
    server: Server = Server(SERVER_NAME, version=__version__)
    dispatcher = ToolDispatcher(client)
    exposer = ResourceExposer(client)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return dispatcher.list_tools()

    # Arguments are validated by the dispatcher so failures come back as
    # tool-specific error results.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict) -> types.CallToolResult:
        return await dispatcher.call_tool(name, arguments)

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return await exposer.list_resources()

    @server.read_resource()
    async def read_resource(uri) -> list[ReadResourceContents]:
        text = await exposer.read_resource(str(uri))
        return [ReadResourceContents(content=text, mime_type=RESOURCE_MIME_TYPE)]

    @server.set_logging_level()
    async def set_logging_level(level: types.LoggingLevel) -> None:
        set_client_level(level)

    return server


async def serve(client: RedashClient) -> None:
    server = build_server(client)
    attach_notification_handler(server)

    async with stdio_server() as (read_stream, write_stream):
        logger.info("Redash MCP server connected")
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> None:
    """Synchronous entrypoint for console_scripts."""
    env_path = Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config = RedashConfig.from_env()
    configure_logging(config.log_level)
    logger.info("Starting Redash MCP server %s...", __version__)

    try:
        client = RedashClient(config=config)
    except ConfigurationError as exc:
        logger.error("%s", exc.summary())
        print(f"Error: {exc.summary()}\n\n{_USAGE}", file=sys.stderr)
        sys.exit(1)

    try:
        asyncio.run(serve(client))
    except Exception as exc:  # noqa: BLE001
        logger.error("Failed to start server: %s", exc, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

# Redash MCP Server
# File: tools/dispatcher.py
# Version: v6
#
# NOTE: This module is the single place where Redash operations are
# exposed as MCP tools. The stdio transport only forwards list-tools and
# call-tool requests here.

"""Tool catalog and call dispatch for the Redash MCP server."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

import pydantic
from mcp import types

from ..client import RedashClient
from ..errors import RedashMCPError, UnknownToolError, UpstreamError, ValidationError
from .schemas import (
    CreateQueryArguments,
    CreateVisualizationArguments,
    DashboardIdArguments,
    ExecuteAdhocQueryArguments,
    ExecuteQueryArguments,
    ListDashboardsArguments,
    ListQueriesArguments,
    NoArguments,
    QueryIdArguments,
    ToolArguments,
    UpdateQueryArguments,
    UpdateVisualizationArguments,
    VisualizationIdArguments,
)

logger = logging.getLogger(__name__)

# create-query and update-query take near-identical arguments, so they are
# validated before the general lookup and reported with their own message.
EARLY_VALIDATED_TOOLS = ("create-query", "update-query")


@dataclass
class ToolSpec:
    name: str
    description: str
    arguments: Type[ToolArguments]
    handler: Callable[[Any], Awaitable[Any]]

    def to_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.arguments.input_schema(),
        )


def _format_validation_error(exc: pydantic.ValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = ".".join(str(x) for x in error["loc"]) or "arguments"
        parts.append(f"{field}: {error['msg']}")
    return "; ".join(parts)


def _success(value: Any) -> types.CallToolResult:
    return types.CallToolResult(
        content=[
            types.TextContent(type="text", text=json.dumps(value, indent=2, default=str))
        ],
    )


def _failure(message: str) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=message)],
        isError=True,
    )


class ToolDispatcher:
    """Declares the Redash tools and routes calls to a ``RedashClient``.

    ``call_tool`` never raises: every outcome is either a JSON text block
    or an error-flagged text block.
    """

    def __init__(self, client: RedashClient) -> None:
        self.client = client
        self._tools: Dict[str, ToolSpec] = {spec.name: spec for spec in self._catalog()}

    def _catalog(self) -> List[ToolSpec]:
        return [
            ToolSpec(
                "list-queries",
                "List all available queries in Redash",
                ListQueriesArguments,
                self._list_queries,
            ),
            ToolSpec(
                "get-query",
                "Get details of a specific query",
                QueryIdArguments,
                self._get_query,
            ),
            ToolSpec(
                "create-query",
                "Create a new query in Redash",
                CreateQueryArguments,
                self._create_query,
            ),
            ToolSpec(
                "update-query",
                "Update an existing query in Redash; only the given fields change",
                UpdateQueryArguments,
                self._update_query,
            ),
            ToolSpec(
                "archive-query",
                "Archive (soft-delete) a query in Redash",
                QueryIdArguments,
                self._archive_query,
            ),
            ToolSpec(
                "list-data-sources",
                "List all available data sources in Redash",
                NoArguments,
                self._list_data_sources,
            ),
            ToolSpec(
                "execute-query",
                "Execute a Redash query and return results",
                ExecuteQueryArguments,
                self._execute_query,
            ),
            ToolSpec(
                "execute-adhoc-query",
                "Execute SQL against a data source without saving a query",
                ExecuteAdhocQueryArguments,
                self._execute_adhoc_query,
            ),
            ToolSpec(
                "list-dashboards",
                "List all available dashboards in Redash",
                ListDashboardsArguments,
                self._list_dashboards,
            ),
            ToolSpec(
                "get-dashboard",
                "Get details of a specific dashboard",
                DashboardIdArguments,
                self._get_dashboard,
            ),
            ToolSpec(
                "get-visualization",
                "Get details of a specific visualization",
                VisualizationIdArguments,
                self._get_visualization,
            ),
            ToolSpec(
                "create-visualization",
                "Create a visualization for a query",
                CreateVisualizationArguments,
                self._create_visualization,
            ),
            ToolSpec(
                "update-visualization",
                "Update an existing visualization; only the given fields change",
                UpdateVisualizationArguments,
                self._update_visualization,
            ),
            ToolSpec(
                "delete-visualization",
                "Delete a visualization",
                VisualizationIdArguments,
                self._delete_visualization,
            ),
        ]

    # ------------------------------------------------------------------
    # Catalog & dispatch
    # ------------------------------------------------------------------

    def list_tools(self) -> List[types.Tool]:
        return [spec.to_tool() for spec in self._tools.values()]

    def _validate(self, spec: ToolSpec, arguments: Dict[str, Any]) -> ToolArguments:
        try:
            return spec.arguments.model_validate(arguments)
        except pydantic.ValidationError as exc:
            raise ValidationError(spec.name, _format_validation_error(exc)) from exc

    async def call_tool(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> types.CallToolResult:
        arguments = arguments or {}
        logger.debug("Tool request received: %s with args: %s", name, arguments)

        if name in EARLY_VALIDATED_TOOLS:
            spec = self._tools[name]
            try:
                validated = self._validate(spec, arguments)
            except ValidationError as exc:
                logger.error("Schema validation failed for %s: %s", name, exc.message)
                return _failure(exc.summary())
            return await self._invoke(spec, validated)

        spec = self._tools.get(name)
        if spec is None:
            logger.error("Unknown tool requested: %s", name)
            return _failure(UnknownToolError(name).summary())

        try:
            validated = self._validate(spec, arguments)
        except ValidationError as exc:
            logger.error("Schema validation failed for %s: %s", name, exc.message)
            return _failure(exc.summary())

        return await self._invoke(spec, validated)

    async def _invoke(self, spec: ToolSpec, arguments: ToolArguments) -> types.CallToolResult:
        try:
            value = await spec.handler(arguments)
        except UpstreamError as exc:
            logger.error(
                "Error executing tool %s: %s. Response snippet: %s",
                spec.name,
                exc.summary(),
                exc.body_preview,
            )
            return _failure(f"Error executing {spec.name}: {exc.summary()}")
        except RedashMCPError as exc:
            logger.error("Error executing tool %s: %s", spec.name, exc.summary())
            return _failure(f"Error executing {spec.name}: {exc.summary()}")
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error executing tool %s", spec.name)
            return _failure(f"Error executing {spec.name}: {exc}")

        return _success(value)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _list_queries(self, args: ListQueriesArguments) -> Any:
        queries = await self.client.list_queries(
            page=args.page, page_size=args.page_size, search_term=args.search_term
        )
        logger.debug("Listed %d queries", len(queries["results"]))
        return queries

    async def _get_query(self, args: QueryIdArguments) -> Any:
        return await self.client.get_query(args.query_id)

    async def _create_query(self, args: CreateQueryArguments) -> Any:
        return await self.client.create_query(
            name=args.name,
            data_source_id=args.data_source_id,
            query=args.query,
            description=args.description,
            options=args.options,
            schedule=args.schedule,
            tags=args.tags,
        )

    async def _update_query(self, args: UpdateQueryArguments) -> Any:
        return await self.client.update_query(args.query_id, args.changes())

    async def _archive_query(self, args: QueryIdArguments) -> Any:
        return await self.client.archive_query(args.query_id)

    async def _list_data_sources(self, args: NoArguments) -> Any:
        return await self.client.list_data_sources()

    async def _execute_query(self, args: ExecuteQueryArguments) -> Any:
        return await self.client.execute_query(args.query_id, args.parameters)

    async def _execute_adhoc_query(self, args: ExecuteAdhocQueryArguments) -> Any:
        return await self.client.execute_adhoc_query(args.query, args.data_source_id)

    async def _list_dashboards(self, args: ListDashboardsArguments) -> Any:
        return await self.client.list_dashboards(page=args.page, page_size=args.page_size)

    async def _get_dashboard(self, args: DashboardIdArguments) -> Any:
        return await self.client.get_dashboard(args.dashboard_id)

    async def _get_visualization(self, args: VisualizationIdArguments) -> Any:
        return await self.client.get_visualization(args.visualization_id)

    async def _create_visualization(self, args: CreateVisualizationArguments) -> Any:
        return await self.client.create_visualization(args.provided())

    async def _update_visualization(self, args: UpdateVisualizationArguments) -> Any:
        return await self.client.update_visualization(
            args.visualization_id, args.changes()
        )

    async def _delete_visualization(self, args: VisualizationIdArguments) -> Any:
        await self.client.delete_visualization(args.visualization_id)
        return {"success": True}

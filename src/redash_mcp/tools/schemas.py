# Redash MCP Server
# File: tools/schemas.py
# Version: v4

"""Argument models for the Redash MCP tools.

Each tool's ``inputSchema`` is generated from its model. Field aliases are
the camelCase names advertised to MCP clients; the snake_case field names
match the Redash API and are accepted on input too. Unknown keys are
rejected so that, for example, update-style arguments sent to
``create-query`` fail loudly instead of being dropped.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def provided(self, exclude: Optional[set] = None) -> Dict[str, Any]:
        """Fields the caller explicitly set, keyed by Redash field name.

        Presence, not truthiness, decides inclusion: ``False``, ``0`` and
        ``""`` are kept; omitted fields never appear.
        """
        return self.model_dump(exclude_unset=True, exclude=exclude)

    @classmethod
    def input_schema(cls) -> Dict[str, Any]:
        schema = cls.model_json_schema(by_alias=True)
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema


class NoArguments(ToolArguments):
    pass


class ListQueriesArguments(ToolArguments):
    page: int = Field(1, ge=1, description="Page number (starts at 1)")
    page_size: int = Field(
        25, ge=1, le=250, alias="pageSize", description="Number of results per page"
    )
    search_term: Optional[str] = Field(
        None, alias="searchTerm", description="Only return queries matching this text"
    )


class QueryIdArguments(ToolArguments):
    query_id: int = Field(alias="queryId", description="ID of the query")


class CreateQueryArguments(ToolArguments):
    name: str = Field(description="Name of the query")
    data_source_id: int = Field(
        alias="dataSourceId", description="ID of the data source to use"
    )
    query: str = Field(description="SQL query text")
    description: Optional[str] = Field(None, description="Description of the query")
    options: Optional[Dict[str, Any]] = Field(None, description="Query options")
    schedule: Optional[Dict[str, Any]] = Field(None, description="Query schedule")
    tags: Optional[List[str]] = Field(None, description="Tags for the query")


class UpdateQueryArguments(ToolArguments):
    query_id: int = Field(alias="queryId", description="ID of the query to update")
    name: Optional[str] = Field(None, description="New name of the query")
    data_source_id: Optional[int] = Field(
        None, alias="dataSourceId", description="ID of the data source to use"
    )
    query: Optional[str] = Field(None, description="SQL query text")
    description: Optional[str] = Field(None, description="Description of the query")
    options: Optional[Dict[str, Any]] = Field(None, description="Query options")
    schedule: Optional[Dict[str, Any]] = Field(None, description="Query schedule")
    tags: Optional[List[str]] = Field(None, description="Tags for the query")
    is_archived: Optional[bool] = Field(
        None, alias="isArchived", description="Whether the query is archived"
    )
    is_draft: Optional[bool] = Field(
        None, alias="isDraft", description="Whether the query is a draft"
    )

    def changes(self) -> Dict[str, Any]:
        return self.provided(exclude={"query_id"})


class ExecuteQueryArguments(ToolArguments):
    query_id: int = Field(alias="queryId", description="ID of the query to execute")
    parameters: Optional[Dict[str, Any]] = Field(
        None, description="Parameters to pass to the query (if any)"
    )


class ExecuteAdhocQueryArguments(ToolArguments):
    query: str = Field(description="SQL query text to run")
    data_source_id: int = Field(
        alias="dataSourceId", description="ID of the data source to run against"
    )


class ListDashboardsArguments(ToolArguments):
    page: int = Field(1, ge=1, description="Page number (starts at 1)")
    page_size: int = Field(
        25, ge=1, le=250, alias="pageSize", description="Number of results per page"
    )


class DashboardIdArguments(ToolArguments):
    dashboard_id: int = Field(alias="dashboardId", description="ID of the dashboard")


class VisualizationIdArguments(ToolArguments):
    visualization_id: int = Field(
        alias="visualizationId", description="ID of the visualization"
    )


class CreateVisualizationArguments(ToolArguments):
    query_id: int = Field(
        alias="queryId", description="ID of the query the visualization belongs to"
    )
    type: str = Field(description="Visualization type, e.g. CHART, TABLE, COUNTER")
    name: str = Field(description="Name of the visualization")
    options: Dict[str, Any] = Field(description="Visualization options (type specific)")
    description: Optional[str] = Field(None, description="Description of the visualization")


class UpdateVisualizationArguments(ToolArguments):
    visualization_id: int = Field(
        alias="visualizationId", description="ID of the visualization to update"
    )
    query_id: Optional[int] = Field(None, alias="queryId", description="ID of the query")
    type: Optional[str] = Field(None, description="Visualization type")
    name: Optional[str] = Field(None, description="Name of the visualization")
    options: Optional[Dict[str, Any]] = Field(None, description="Visualization options")
    description: Optional[str] = Field(None, description="Description of the visualization")

    def changes(self) -> Dict[str, Any]:
        return self.provided(exclude={"visualization_id"})

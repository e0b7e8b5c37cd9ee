# Redash MCP Server
# File: models.py
# Version: v3

"""Payload shapes used by the Redash MCP server.

Redash entities are passed through untouched; the TypedDicts below only
document the fields we rely on. Free-form ``options`` / ``schedule``
values are opaque JSON that is forwarded, never inspected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TypedDict, Union

JSONValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


class Visualization(TypedDict, total=False):
    id: int
    type: str
    name: str
    description: str
    options: JSONValue
    query_id: int


class Query(TypedDict, total=False):
    id: int
    name: str
    description: str
    query: str
    data_source_id: int
    latest_query_data_id: Optional[int]
    is_archived: bool
    is_draft: bool
    created_at: str
    updated_at: str
    options: JSONValue
    visualizations: List[Visualization]


class Widget(TypedDict, total=False):
    id: int
    visualization: Visualization
    text: str
    width: int
    options: JSONValue
    dashboard_id: int


class Dashboard(TypedDict, total=False):
    id: int
    name: str
    slug: str
    tags: List[str]
    is_archived: bool
    is_draft: bool
    version: int
    widgets: List[Widget]


class QueryResultData(TypedDict, total=False):
    columns: List[Dict[str, Any]]
    rows: List[Dict[str, Any]]


class QueryResult(TypedDict, total=False):
    id: int
    query_id: int
    data_source_id: int
    query_hash: str
    query: str
    data: QueryResultData
    runtime: float
    retrieved_at: str


class Page(TypedDict):
    """Paginated list response, re-keyed for tool consumers."""

    count: int
    page: int
    pageSize: int
    results: List[Dict[str, Any]]


class JobStatus:
    """Status codes reported by ``/api/jobs/{id}``."""

    PENDING = 1
    STARTED = 2
    SUCCESS = 3
    FAILURE = 4
    CANCELLED = 5

    TERMINAL = frozenset({SUCCESS, FAILURE})


@dataclass
class AsyncJob:
    """A Redash background job, as seen while polling for a query result."""

    id: str
    status: int
    result: Optional[Dict[str, Any]] = None
    query_result_id: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AsyncJob":
        """Build a job from either ``{"job": {...}}`` or the bare job object."""
        job = payload.get("job", payload) if isinstance(payload, dict) else {}
        return cls(
            id=str(job.get("id", "")),
            status=int(job.get("status") or 0),
            result=job.get("result"),
            query_result_id=job.get("query_result_id"),
            error=job.get("error") or None,
        )

    @property
    def done(self) -> bool:
        return self.status in JobStatus.TERMINAL


@dataclass(frozen=True)
class ResourceRef:
    """Parsed ``redash://{kind}/{id}`` resource address."""

    kind: str
    id: int

    def uri(self, scheme: str = "redash") -> str:
        return f"{scheme}://{self.kind}/{self.id}"

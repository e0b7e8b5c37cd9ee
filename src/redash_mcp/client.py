# Redash MCP Server
# File: client.py
# Version: v8
"""High-level client for the Redash REST API.

Implements:

- query CRUD (list / get / create / update / archive) via /api/queries
- list_data_sources() via /api/data_sources
- execute_query() and execute_adhoc_query(), including job polling
- dashboard reads via /api/dashboards
- visualization CRUD via /api/visualizations

Query execution may answer synchronously with a result, or hand back a
background job that is polled via /api/jobs/<id> until it completes,
fails or the caller's timeout elapses.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import httpx
from httpx import HTTPStatusError, RequestError

from .auth import ApiKeyAuth
from .config import RedashConfig
from .errors import (
    NotFoundError,
    QueryExecutionError,
    QueryExecutionTimeout,
    UpstreamError,
)
from .models import (
    AsyncJob,
    Dashboard,
    JobStatus,
    Page,
    Query,
    QueryResult,
    Visualization,
)

logger = logging.getLogger(__name__)

DEFAULT_POLL_TIMEOUT = 60.0
DEFAULT_POLL_INTERVAL = 1.0


@dataclass
class RedashClient:
    """Wrapper around the Redash query, job, dashboard and visualization APIs.

    Construction fails with ``ConfigurationError`` when the URL or API key
    is missing. ``transport`` is handed to ``httpx`` unchanged and exists
    so tests can substitute ``httpx.MockTransport``.
    """

    config: RedashConfig
    transport: Optional[httpx.AsyncBaseTransport] = None
    auth: ApiKeyAuth = field(init=False)

    def __post_init__(self) -> None:
        self.config.require()
        self.auth = ApiKeyAuth(config=self.config)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        action: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        """Perform one API call and return the decoded JSON body.

        ``action`` is a short human description ("fetch query 42") used in
        error messages.
        """
        url = f"{self.config.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)

        async with httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            transport=self.transport,
        ) as http_client:
            try:
                response = await http_client.request(
                    method,
                    url,
                    headers=self.auth.headers(),
                    params=params,
                    json=json,
                )
            except RequestError as exc:
                raise UpstreamError(
                    f"Error calling Redash API to {action}: {exc}"
                ) from exc

            if response.status_code == 404:
                raise NotFoundError(
                    f"Failed to {action}: not found",
                    status_code=404,
                    body=response.text,
                )

            try:
                response.raise_for_status()
            except HTTPStatusError as exc:
                status = response.status_code
                logger.warning(
                    "Redash API error for %s %s (HTTP %s). Response snippet: %s",
                    method,
                    url,
                    status,
                    response.text[:500],
                )
                raise UpstreamError(
                    f"Failed to {action}",
                    status_code=status,
                    body=response.text,
                ) from exc

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"Unexpected non-JSON response when trying to {action}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

    @staticmethod
    def _page(data: Any, page: int, page_size: int) -> Page:
        """Re-key a Redash paginated response."""
        data = data if isinstance(data, dict) else {}
        results = data.get("results") or []
        return {
            "count": data.get("count", len(results)),
            "page": data.get("page", page),
            "pageSize": data.get("page_size", page_size),
            "results": results,
        }

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_queries(
        self,
        page: int = 1,
        page_size: int = 25,
        search_term: Optional[str] = None,
    ) -> Page:
        """List saved queries, optionally filtered by a search term."""
        params: Dict[str, Any] = {"page": page, "page_size": page_size}
        if search_term:
            params["q"] = search_term

        data = await self._request("GET", "/api/queries", "list queries", params=params)
        return self._page(data, page, page_size)

    async def get_query(self, query_id: int) -> Query:
        return await self._request(
            "GET", f"/api/queries/{query_id}", f"fetch query {query_id}"
        )

    async def create_query(
        self,
        name: str,
        data_source_id: int,
        query: str,
        description: Optional[str] = None,
        options: Any = None,
        schedule: Any = None,
        tags: Optional[List[str]] = None,
    ) -> Query:
        """Create a saved query.

        Omitted optional fields are always sent with their defaults:
        ``description=""``, ``options={}``, ``schedule=None``, ``tags=[]``.
        """
        payload = {
            "name": name,
            "data_source_id": data_source_id,
            "query": query,
            "description": description if description is not None else "",
            "options": options if options is not None else {},
            "schedule": schedule,
            "tags": tags if tags is not None else [],
        }
        return await self._request("POST", "/api/queries", "create query", json=payload)

    async def update_query(self, query_id: int, changes: Mapping[str, Any]) -> Query:
        """Update a saved query with exactly the keys present in ``changes``."""
        payload = dict(changes)
        logger.debug("Updating query %s with fields %s", query_id, sorted(payload))
        return await self._request(
            "POST", f"/api/queries/{query_id}", f"update query {query_id}", json=payload
        )

    async def archive_query(self, query_id: int) -> Dict[str, bool]:
        """Archive (soft-delete) a saved query."""
        await self._request(
            "DELETE", f"/api/queries/{query_id}", f"archive query {query_id}"
        )
        return {"success": True}

    async def list_data_sources(self) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/api/data_sources", "list data sources")
        return data if isinstance(data, list) else []

    # ------------------------------------------------------------------
    # Execution & job polling
    # ------------------------------------------------------------------

    async def execute_query(
        self,
        query_id: int,
        parameters: Optional[Dict[str, Any]] = None,
        timeout: float = DEFAULT_POLL_TIMEOUT,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> QueryResult:
        """Run a saved query and return its result.

        If Redash answers with a job handle the job is polled until it
        finishes; otherwise the immediate response is returned unchanged.
        """
        payload: Dict[str, Any] = {}
        if parameters is not None:
            payload["parameters"] = parameters

        data = await self._request(
            "POST",
            f"/api/queries/{query_id}/results",
            f"execute query {query_id}",
            json=payload,
        )
        return await self._resolve_submission(data, timeout=timeout, interval=interval)

    async def execute_adhoc_query(
        self,
        query: str,
        data_source_id: int,
        timeout: float = DEFAULT_POLL_TIMEOUT,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> QueryResult:
        """Run SQL against a data source without saving a query.

        Cached results are bypassed (``max_age=0``) and Redash is asked to
        apply its automatic row limit.
        """
        payload = {
            "query": query,
            "data_source_id": data_source_id,
            "max_age": 0,
            "apply_auto_limit": True,
        }
        data = await self._request(
            "POST",
            "/api/query_results",
            f"execute ad-hoc query on data source {data_source_id}",
            json=payload,
        )
        return await self._resolve_submission(data, timeout=timeout, interval=interval)

    async def _resolve_submission(
        self, data: Any, timeout: float, interval: float
    ) -> QueryResult:
        if isinstance(data, dict) and data.get("job"):
            job = AsyncJob.from_payload(data)
            logger.info("Query submitted as job %s; polling for result", job.id)
            return await self.poll_job(job.id, timeout=timeout, interval=interval)
        return data

    async def get_job(self, job_id: str) -> AsyncJob:
        data = await self._request(
            "GET", f"/api/jobs/{job_id}", f"check status of job {job_id}"
        )
        return AsyncJob.from_payload(data or {})

    async def get_query_result(self, query_result_id: int) -> QueryResult:
        """Fetch a stored query result, unwrapping the ``query_result`` envelope."""
        data = await self._request(
            "GET",
            f"/api/query_results/{query_result_id}",
            f"fetch query result {query_result_id}",
        )
        if isinstance(data, dict) and "query_result" in data:
            return data["query_result"]
        return data

    async def poll_job(
        self,
        job_id: str,
        timeout: float = DEFAULT_POLL_TIMEOUT,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> QueryResult:
        """Poll a job until it reaches SUCCESS or FAILURE.

        Errors while checking the job status are raised immediately and are
        not retried. Status values other than SUCCESS and FAILURE mean the
        job is still running.
        """
        started = time.monotonic()
        polls = 0

        while time.monotonic() - started < timeout:
            job = await self.get_job(job_id)
            polls += 1

            if not job.done:
                logger.debug("Job %s still running (status %s)", job_id, job.status)
                await asyncio.sleep(interval)
                continue

            if job.status == JobStatus.FAILURE:
                logger.warning("Job %s failed: %s", job_id, job.error)
                raise QueryExecutionError(job_id, job.error)

            logger.info("Job %s completed after %d poll(s)", job_id, polls)
            if job.query_result_id is not None:
                return await self.get_query_result(job.query_result_id)
            return job.result

        raise QueryExecutionTimeout(job_id, timeout)

    # ------------------------------------------------------------------
    # Dashboards
    # ------------------------------------------------------------------

    async def list_dashboards(self, page: int = 1, page_size: int = 25) -> Page:
        data = await self._request(
            "GET",
            "/api/dashboards",
            "list dashboards",
            params={"page": page, "page_size": page_size},
        )
        return self._page(data, page, page_size)

    async def get_dashboard(self, dashboard_id: int) -> Dashboard:
        return await self._request(
            "GET", f"/api/dashboards/{dashboard_id}", f"fetch dashboard {dashboard_id}"
        )

    # ------------------------------------------------------------------
    # Visualizations
    # ------------------------------------------------------------------

    async def get_visualization(self, visualization_id: int) -> Visualization:
        return await self._request(
            "GET",
            f"/api/visualizations/{visualization_id}",
            f"fetch visualization {visualization_id}",
        )

    async def create_visualization(self, spec: Mapping[str, Any]) -> Visualization:
        """Create a visualization from exactly the keys present in ``spec``."""
        return await self._request(
            "POST", "/api/visualizations", "create visualization", json=dict(spec)
        )

    async def update_visualization(
        self, visualization_id: int, changes: Mapping[str, Any]
    ) -> Visualization:
        """Update a visualization with exactly the keys present in ``changes``."""
        return await self._request(
            "POST",
            f"/api/visualizations/{visualization_id}",
            f"update visualization {visualization_id}",
            json=dict(changes),
        )

    async def delete_visualization(self, visualization_id: int) -> None:
        await self._request(
            "DELETE",
            f"/api/visualizations/{visualization_id}",
            f"delete visualization {visualization_id}",
        )

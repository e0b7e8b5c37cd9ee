# Redash MCP Server
# File: resources.py
# Version: v4

"""Expose Redash queries and dashboards as MCP resources.

URIs look like ``redash://query/<id>`` and ``redash://dashboard/<id>``.
Listing degrades to whatever could be fetched; reading reports upstream
failures to the caller.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Tuple

from mcp import types

from .client import RedashClient
from .errors import InvalidURI, RedashMCPError
from .models import ResourceRef

logger = logging.getLogger(__name__)

RESOURCE_MIME_TYPE = "application/json"


class ResourceExposer:
    def __init__(
        self,
        client: RedashClient,
        scheme: str = "redash",
        page_size: int = 100,
    ) -> None:
        self.client = client
        self.scheme = scheme
        self.page_size = page_size
        self._pattern = re.compile(rf"^{re.escape(scheme)}://(query|dashboard)/(\d+)$")

    def parse_uri(self, uri: str) -> ResourceRef:
        """Split a resource URI into kind and numeric id, or raise InvalidURI."""
        match = self._pattern.match(str(uri))
        if not match:
            raise InvalidURI(str(uri))
        kind, raw_id = match.groups()
        return ResourceRef(kind=kind, id=int(raw_id))

    def _resource(self, ref: ResourceRef, name: str, description: str) -> types.Resource:
        return types.Resource(
            uri=ref.uri(self.scheme),
            name=name,
            description=description,
            mimeType=RESOURCE_MIME_TYPE,
        )

    def _refs(self, kind: str, items: Any) -> List[Tuple[ResourceRef, Dict[str, Any]]]:
        """Pair each listed item with its ResourceRef, skipping malformed entries."""
        refs: List[Tuple[ResourceRef, Dict[str, Any]]] = []
        for item in items or []:
            if not isinstance(item, dict):
                continue
            raw_id = item.get("id")
            if isinstance(raw_id, bool) or not isinstance(raw_id, (int, str)):
                continue
            if isinstance(raw_id, str) and not raw_id.isdigit():
                continue
            refs.append((ResourceRef(kind=kind, id=int(raw_id)), item))
        return refs

    async def list_resources(self) -> List[types.Resource]:
        """List the first page of queries and dashboards.

        Never raises: a collection that cannot be fetched is left out, and
        items without a usable id are skipped.
        """
        resources: List[types.Resource] = []

        try:
            queries = await self.client.list_queries(page=1, page_size=self.page_size)
        except RedashMCPError as exc:
            logger.error("Error listing query resources: %s", exc.summary())
        else:
            for ref, query in self._refs("query", queries["results"]):
                resources.append(
                    self._resource(
                        ref,
                        name=str(query.get("name") or f"Query {ref.id}"),
                        description=str(query.get("description") or f"Query ID: {ref.id}"),
                    )
                )

        try:
            dashboards = await self.client.list_dashboards(page=1, page_size=self.page_size)
        except RedashMCPError as exc:
            logger.error("Error listing dashboard resources: %s", exc.summary())
        else:
            for ref, dashboard in self._refs("dashboard", dashboards["results"]):
                resources.append(
                    self._resource(
                        ref,
                        name=str(dashboard.get("name") or f"Dashboard {ref.id}"),
                        description=f"Dashboard ID: {ref.id}",
                    )
                )

        return resources

    async def read(self, uri: str) -> Dict[str, Any]:
        """Fetch the entity behind a resource URI.

        A query resource is returned together with a fresh execution
        result, which may involve job polling.
        """
        ref = self.parse_uri(uri)

        if ref.kind == "query":
            query = await self.client.get_query(ref.id)
            result = await self.client.execute_query(ref.id)
            return {"query": query, "result": result}

        return await self.client.get_dashboard(ref.id)

    async def read_resource(self, uri: str) -> str:
        """Return the JSON text for a resource URI; errors propagate."""
        try:
            payload = await self.read(uri)
        except RedashMCPError as exc:
            logger.error("Error reading resource %s: %s", uri, exc.summary())
            raise
        return json.dumps(payload, indent=2, default=str)

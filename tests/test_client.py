# Redash MCP Server
# File: tests/test_client.py
# Version: v3

"""Tests for RedashClient request shaping and error mapping.

All HTTP goes through the FakeRedash transport from conftest; nothing
talks to a real Redash instance.
"""

from __future__ import annotations

import httpx
import pytest

from redash_mcp.errors import NotFoundError, UpstreamError


@pytest.mark.asyncio
async def test_list_queries_rekeys_page_and_sends_auth(client, redash):
    redash.route(
        "GET",
        "/api/queries",
        (200, {"count": 2, "page": 1, "page_size": 25, "results": [{"id": 1}, {"id": 2}]}),
    )

    page = await client.list_queries()

    assert page == {"count": 2, "page": 1, "pageSize": 25, "results": [{"id": 1}, {"id": 2}]}
    request = redash.requests[0]
    assert request.headers["Authorization"] == "Key secret-key"
    assert dict(request.url.params) == {"page": "1", "page_size": "25"}
    assert str(request.url).startswith("https://redash.test/api/queries")


@pytest.mark.asyncio
async def test_list_queries_forwards_search_term(client, redash):
    redash.route("GET", "/api/queries", (200, {"count": 0, "page": 2, "page_size": 5, "results": []}))

    await client.list_queries(page=2, page_size=5, search_term="revenue")

    assert dict(redash.requests[0].url.params) == {"page": "2", "page_size": "5", "q": "revenue"}


@pytest.mark.asyncio
async def test_create_query_fills_defaults(client, redash):
    redash.route("POST", "/api/queries", (200, {"id": 10, "name": "Daily"}))

    created = await client.create_query(name="Daily", data_source_id=3, query="SELECT 1")

    assert created == {"id": 10, "name": "Daily"}
    assert redash.body(redash.requests[0]) == {
        "name": "Daily",
        "data_source_id": 3,
        "query": "SELECT 1",
        "description": "",
        "options": {},
        "schedule": None,
        "tags": [],
    }


@pytest.mark.asyncio
async def test_create_query_keeps_given_optionals(client, redash):
    redash.route("POST", "/api/queries", (200, {"id": 11}))

    await client.create_query(
        name="Weekly",
        data_source_id=3,
        query="SELECT 2",
        description="desc",
        options={"parameters": []},
        schedule={"interval": 3600},
        tags=["kpi"],
    )

    body = redash.body(redash.requests[0])
    assert body["description"] == "desc"
    assert body["options"] == {"parameters": []}
    assert body["schedule"] == {"interval": 3600}
    assert body["tags"] == ["kpi"]


@pytest.mark.asyncio
async def test_update_query_sends_only_given_keys(client, redash):
    redash.route("POST", "/api/queries/7", (200, {"id": 7}))

    await client.update_query(7, {"is_archived": False, "description": ""})

    assert redash.body(redash.requests[0]) == {"is_archived": False, "description": ""}


@pytest.mark.asyncio
async def test_archive_query_issues_delete(client, redash):
    redash.route("DELETE", "/api/queries/7", (200, None))

    assert await client.archive_query(7) == {"success": True}
    assert len(redash.calls("DELETE", "/api/queries/7")) == 1


@pytest.mark.asyncio
async def test_execute_query_inline_result_is_single_call(client, redash):
    inline = {"query_result": {"id": 5, "data": {"columns": [], "rows": []}}}
    redash.route("POST", "/api/queries/42/results", (200, inline))

    result = await client.execute_query(42)

    assert result == inline
    assert len(redash.requests) == 1
    assert redash.body(redash.requests[0]) == {}


@pytest.mark.asyncio
async def test_execute_query_forwards_parameters(client, redash):
    redash.route("POST", "/api/queries/42/results", (200, {"query_result": {"id": 5}}))

    await client.execute_query(42, {"country": "JP"})

    assert redash.body(redash.requests[0]) == {"parameters": {"country": "JP"}}


@pytest.mark.asyncio
async def test_adhoc_query_bypasses_cache_and_limits(client, redash):
    redash.route("POST", "/api/query_results", (200, {"query_result": {"id": 8}}))

    await client.execute_adhoc_query("SELECT now()", 2)

    assert redash.body(redash.requests[0]) == {
        "query": "SELECT now()",
        "data_source_id": 2,
        "max_age": 0,
        "apply_auto_limit": True,
    }


@pytest.mark.asyncio
async def test_visualization_crud_paths(client, redash):
    redash.route("POST", "/api/visualizations", (200, {"id": 30}))
    redash.route("POST", "/api/visualizations/30", (200, {"id": 30, "name": "Renamed"}))
    redash.route("DELETE", "/api/visualizations/30", (200, None))

    await client.create_visualization({"query_id": 1, "type": "TABLE", "name": "T", "options": {}})
    await client.update_visualization(30, {"name": "Renamed"})
    assert await client.delete_visualization(30) is None

    assert redash.body(redash.requests[0]) == {"query_id": 1, "type": "TABLE", "name": "T", "options": {}}
    assert redash.body(redash.requests[1]) == {"name": "Renamed"}
    assert redash.requests[2].method == "DELETE"


@pytest.mark.asyncio
async def test_list_data_sources_passthrough(client, redash):
    sources = [{"id": 1, "name": "pg", "type": "pg"}]
    redash.route("GET", "/api/data_sources", (200, sources))

    assert await client.list_data_sources() == sources


@pytest.mark.asyncio
async def test_not_found_maps_to_not_found_error(client, redash):
    with pytest.raises(NotFoundError) as excinfo:
        await client.get_query(404)

    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_server_error_carries_status_and_body(client, redash):
    redash.route("GET", "/api/dashboards/1", (500, {"message": "boom"}))

    with pytest.raises(UpstreamError) as excinfo:
        await client.get_dashboard(1)

    err = excinfo.value
    assert not isinstance(err, NotFoundError)
    assert err.status_code == 500
    assert "boom" in err.body
    assert err.summary() == "Failed to fetch dashboard 1 (HTTP 500)"


@pytest.mark.asyncio
async def test_network_failure_maps_to_upstream_error(client, redash):
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    redash.route("GET", "/api/visualizations/3", refuse)

    with pytest.raises(UpstreamError) as excinfo:
        await client.get_visualization(3)

    assert excinfo.value.status_code is None
    assert "connection refused" in excinfo.value.summary()

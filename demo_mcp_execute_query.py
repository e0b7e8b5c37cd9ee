# demo_mcp_execute_query.py
# Version: v1
#
# Demo: call the execute-query / execute-adhoc-query MCP tools directly
# (without an MCP host) and print the text block they return.
#
# Usage:
#
#   export REDASH_URL=https://redash.example.com
#   export REDASH_API_KEY=...
#   export REDASH_TEST_QUERY_ID=42
#   export REDASH_TEST_DATA_SOURCE_ID=1
#   python demo_mcp_execute_query.py

import asyncio
import os

from redash_mcp.client import RedashClient
from redash_mcp.config import RedashConfig
from redash_mcp.tools import ToolDispatcher

TEST_QUERY_ID = int(os.environ.get("REDASH_TEST_QUERY_ID", "1"))
TEST_DATA_SOURCE_ID = int(os.environ.get("REDASH_TEST_DATA_SOURCE_ID", "1"))


async def main() -> None:
    dispatcher = ToolDispatcher(RedashClient(config=RedashConfig.from_env()))

    print(f"Calling execute-query for query {TEST_QUERY_ID}")
    result = await dispatcher.call_tool("execute-query", {"queryId": TEST_QUERY_ID})
    print("isError:", result.isError)
    print(result.content[0].text[:2000])
    print()

    print(f"Calling execute-adhoc-query on data source {TEST_DATA_SOURCE_ID}")
    result = await dispatcher.call_tool(
        "execute-adhoc-query",
        {"query": "SELECT 1 AS one", "dataSourceId": TEST_DATA_SOURCE_ID},
    )
    print("isError:", result.isError)
    print(result.content[0].text[:2000])


if __name__ == "__main__":
    asyncio.run(main())

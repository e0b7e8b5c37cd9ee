# demo_list_queries.py
# Version: v1
#
# Demo: list saved queries and data sources straight from the client.
#
# Usage:
#
#   export REDASH_URL=https://redash.example.com
#   export REDASH_API_KEY=...
#   python demo_list_queries.py [search term]

import asyncio
import sys

from redash_mcp.client import RedashClient
from redash_mcp.config import RedashConfig


async def main() -> None:
    client = RedashClient(config=RedashConfig.from_env())
    search_term = sys.argv[1] if len(sys.argv) > 1 else None

    sources = await client.list_data_sources()
    print(f"Data sources returned: {len(sources)}")
    for ds in sources:
        print(f"- {ds.get('name')} (id={ds.get('id')}, type={ds.get('type')})")

    page = await client.list_queries(page=1, page_size=10, search_term=search_term)
    print()
    print(f"Queries: {len(page['results'])} of {page['count']}")
    for q in page["results"]:
        print(f"- {q.get('name')} (id={q.get('id')}, data_source_id={q.get('data_source_id')})")


if __name__ == "__main__":
    asyncio.run(main())

"""Scroll export entry point.

Streams every document matching a query from the configured search backend
to stdout, one JSON document per line.

Usage:
    python -m services.scroll_export.scroll_export '{"index": "logs", "body": {"query": {"match_all": {}}}}'
"""

import asyncio
import json
import sys

from escroll.clients.search.SearchClientManager import SearchClientManager
from escroll.clients.search.models.ScrollQuery import ScrollQuery
from escroll.helper.HelperConfig import HelperConfig
from escroll.logging.logging_setup import setup_logging
from escroll.stream.ScrollStream import ScrollStream, StreamOptions
from escroll.stream.errors import ScrollStreamError


async def run_export(config: HelperConfig, search_client, query: ScrollQuery, out=sys.stdout) -> int:
    """Write all hits of a scroll query to a text stream.

    Args:
        config (HelperConfig): The application configuration.
        search_client (SearchClientInterface): A booted search client.
        query (ScrollQuery): The query to export.
        out (TextIO): Destination for the NDJSON lines.

    Returns:
        int: The number of exported documents.

    Raises:
        ScrollStreamError: If the scroll fails before all documents were exported.
    """
    if query.size is None:
        query = query.model_copy(update={"size": config.get_number_val("SCROLL_PAGE_SIZE", default=1000)})
    stream = ScrollStream(
        helper_config=config,
        client=search_client,
        query=query,
        optional_fields=config.get_list_val("SCROLL_OPTIONAL_FIELDS", default=[]),
        options=StreamOptions(object_mode=False),
    )
    exported = 0
    try:
        async for line in stream:
            out.write(line + "\n")
            exported += 1
    finally:
        # a failing writer must still let the stream release its scroll context
        stream.close()
        await stream.wait_closed()
    return exported


async def main() -> int:
    """Run a single export and return the process exit code."""
    logger = setup_logging()
    config = HelperConfig(logger=logger)

    if len(sys.argv) < 2:
        logger.error("Usage: python -m services.scroll_export.scroll_export '<json query>'")
        return 2
    query = ScrollQuery.model_validate(json.loads(sys.argv[1]))

    search_client = SearchClientManager(helper_config=config).get_client()
    try:
        await search_client.boot()
        await search_client.do_healthcheck()
        exported = await run_export(config, search_client, query)
        logger.info("Exported %d documents from %s.", exported, search_client.get_engine_name())
        return 0
    except ScrollStreamError as e:
        logger.error("Export failed after %d of %d documents: %s", e.counter, e.total, e.message)
        return 1
    finally:
        await search_client.close()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

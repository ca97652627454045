"""Export router: streams every hit of a scroll query as NDJSON."""

from typing import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, StreamingResponse

from escroll.clients.search.models.ScrollQuery import ScrollQuery
from escroll.dependencies.auth import verify_api_key
from escroll.stream.ScrollStream import ScrollStream, StreamOptions
from escroll.stream.errors import ScrollStreamError
from server.models.requests import ExportRequest

export_router = APIRouter()


def build_scroll_query(request: Request, body: ExportRequest) -> ScrollQuery:
    """Translate an export request into a scroll query, applying configured defaults.

    Args:
        request (Request): The incoming FastAPI request (carries app state).
        body (ExportRequest): The parsed export request.

    Returns:
        ScrollQuery: The query handed to the scroll stream.
    """
    config = request.app.state.config
    search_body: dict = {"query": body.query}
    if body.sort is not None:
        search_body["sort"] = body.sort
    return ScrollQuery(
        index=body.index,
        scroll=body.scroll,
        size=body.size or config.get_number_val("SCROLL_PAGE_SIZE", default=1000),
        body=search_body,
        source=body.source,
    )


async def _ndjson_lines(request: Request, stream: ScrollStream) -> AsyncGenerator[str, None]:
    try:
        async for line in stream:
            yield line + "\n"
    except ScrollStreamError as e:
        # headers are already sent, the truncated body is the only signal left
        request.app.state.logging.error("Export aborted after %d of %d records: %s", e.counter, e.total, e.message)
    finally:
        # no-op once the stream has ended; stops scrolling when the client went away
        stream.close()


@export_router.post(
    "/export",
    dependencies=[Depends(verify_api_key)],
    tags=["Export"],
)
async def handle_export(request: Request, body: ExportRequest) -> StreamingResponse:
    """Stream all documents matching a query as newline-delimited JSON.

    Args:
        request (Request): The incoming FastAPI request (carries app state).
        body (ExportRequest): The query, paging and field options.

    Returns:
        StreamingResponse: One JSON document per line, in server order.

    Raises:
        HTTPException: 400 if an unsupported optional field is requested.
    """
    config = request.app.state.config
    optional_fields = body.optional_fields
    if optional_fields is None:
        optional_fields = config.get_list_val("SCROLL_OPTIONAL_FIELDS", default=[])

    request.app.state.logging.info("Export requested, index=%r", body.index)
    try:
        stream = ScrollStream(
            helper_config=config,
            client=request.app.state.search_client,
            query=build_scroll_query(request, body),
            optional_fields=optional_fields,
            options=StreamOptions(object_mode=False),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return StreamingResponse(_ndjson_lines(request, stream), media_type="application/x-ndjson")


@export_router.get("/health", tags=["Health"])
async def handle_health(request: Request) -> JSONResponse:
    """Report the health of the search backend.

    Args:
        request (Request): The incoming FastAPI request (carries app state).

    Returns:
        JSONResponse: The backend's cluster health, or 503 when it cannot be reached.
    """
    search_client = request.app.state.search_client
    try:
        resp = await search_client.do_healthcheck()
    except Exception as e:
        request.app.state.logging.error("Search backend healthcheck failed: %s", e)
        return JSONResponse(status_code=503, content={"status": "unavailable", "engine": search_client.get_engine_name()})
    return JSONResponse(content={"status": "ok", "engine": search_client.get_engine_name(), "backend": resp.json()})

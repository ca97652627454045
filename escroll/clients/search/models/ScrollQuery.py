"""ScrollQuery model: the initial request of a scroll lifecycle."""

from pydantic import BaseModel, ConfigDict, Field


class ScrollQuery(BaseModel):
    """Describes the initial search of a scroll query.

    Attributes:
        index:         Index (or comma-separated indices / alias) to search.
                       None falls back to the index configured for the client.
        scroll:        Keep-alive duration for the server-side cursor (e.g. "10m").
                       None is resolved to the configured default by the stream.
        size:          Number of hits per page.
        body:          Request body, typically holding "query" and "sort".
        source:        Source filtering, sent as "_source".
        stored_fields: Server-side field projection; hits then carry "fields".
    """

    model_config = ConfigDict(populate_by_name=True)

    index: str | None = None
    scroll: str | None = None
    size: int | None = None
    body: dict = {}
    source: bool | list[str] | None = Field(default=None, alias="_source")
    stored_fields: list[str] | None = None

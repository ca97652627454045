"""ScrollPage model: one normalized page of a scroll query."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, field_validator


class ScrollPage(BaseModel):
    """Normalized view of a single search or scroll response.

    Attributes:
        hits:      Ordered hit objects exactly as returned by the server.
        total:     Total number of matching documents. Elasticsearch 7+ reports
                   {"value": n, "relation": "eq"}, older versions a plain integer;
                   both are stored as int.
        timed_out: True when the server reports that the request timed out.
        shards:    The "_shards" section (total / successful / failed / failures).
        scroll_id: Continuation token for the next scroll call.
    """

    hits: list[dict] = []
    total: int = 0
    timed_out: bool = False
    shards: dict = {}
    scroll_id: str | None = None

    @field_validator("total", mode="before")
    @classmethod
    def _normalize_total(cls, value: Any) -> Any:
        if isinstance(value, Mapping):
            return value.get("value", 0)
        if value is None:
            return 0
        return value

    @property
    def failed_shards(self) -> int:
        return int(self.shards.get("failed") or 0)

    @classmethod
    def from_response(cls, response: Any) -> "ScrollPage":
        """Build a page from a raw client response.

        Accepts either the response body itself or a wrapper exposing it as a
        "body" attribute or key (as transport-level response objects do).

        Args:
            response (Any): The raw response returned by the search client.

        Returns:
            ScrollPage: The normalized page.

        Raises:
            ValueError: If the response does not carry a hits section.
        """
        body = getattr(response, "body", None)
        if body is None and isinstance(response, Mapping):
            body = response.get("body") or response
        if not isinstance(body, Mapping) or not isinstance(body.get("hits"), Mapping):
            raise ValueError("Search response does not contain a 'hits' section.")

        hits = body["hits"]
        return cls(
            hits=hits.get("hits") or [],
            total=hits.get("total"),
            timed_out=bool(body.get("timed_out", body.get("timedOut", False))),
            shards=body.get("_shards") or {},
            scroll_id=body.get("_scroll_id"),
        )

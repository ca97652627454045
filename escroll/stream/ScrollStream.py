"""Scroll stream.

Turns a server-side scroll query into one continuous, consumer-driven
sequence of records. The consumer iterates the stream; whenever its intake
queue runs dry the stream issues the initial search or keeps scrolling, page
after page, until the reported total is reached, a terminal error occurs or
close() was requested.
"""

import asyncio
import json
from enum import Enum

from pydantic import BaseModel

from escroll.clients.search.SearchClientInterface import SearchClientInterface
from escroll.clients.search.models.ScrollPage import ScrollPage
from escroll.clients.search.models.ScrollQuery import ScrollQuery
from escroll.helper.HelperConfig import HelperConfig
from escroll.stream.errors import (
    IncompleteResultError,
    ScrollClientError,
    ScrollStreamError,
    ScrollTimeoutError,
    ShardFailureError,
)

DEFAULT_SCROLL = "10m"
OPTIONAL_FIELDS = ("_id", "_score", "_type", "_index", "_parent", "_routing")

_END = object()


class StreamState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    DRAINING = "draining"
    ENDED = "ended"
    FAILED = "failed"


class StreamOptions(BaseModel):
    """Output configuration of a ScrollStream.

    Attributes:
        object_mode: Emit records as dicts when True, as JSON text lines otherwise.
    """

    object_mode: bool = True


class ScrollStream:
    """Async iterator over every hit of a scroll query, in server order."""

    def __init__(
        self,
        helper_config: HelperConfig,
        client: SearchClientInterface,
        query: ScrollQuery | dict,
        optional_fields: list[str] | None = None,
        options: StreamOptions | None = None,
    ) -> None:
        """
        Args:
            helper_config (HelperConfig): Provides the logger and the default keep-alive (SCROLL_KEEP_ALIVE).
            client (SearchClientInterface): Client offering do_search, do_scroll and do_clear_scroll.
            query (ScrollQuery | dict): The initial query. A missing scroll duration falls back to the default.
            optional_fields (list[str] | None): Hit metadata copied into every record, subset of OPTIONAL_FIELDS.
            options (StreamOptions | None): Output configuration.

        Raises:
            ValueError: If an unsupported optional field is requested.
        """
        self.logging = helper_config.get_logger()
        self._client = client
        if isinstance(query, dict):
            query = ScrollQuery.model_validate(query)
        scroll = query.scroll or helper_config.get_string_val("SCROLL_KEEP_ALIVE", default=DEFAULT_SCROLL)
        self._query = query.model_copy(update={"scroll": scroll})

        self._optional_fields = list(optional_fields or [])
        unsupported = [f for f in self._optional_fields if f not in OPTIONAL_FIELDS]
        if unsupported:
            raise ValueError(f"Unsupported optional fields {unsupported}. Allowed values: {list(OPTIONAL_FIELDS)}")
        self._options = options or StreamOptions()

        # cursor state
        self._reading = False
        self._counter = 0
        self._total = 0
        self._force_close = False

        self._state = StreamState.IDLE
        self._queue: asyncio.Queue = asyncio.Queue()
        self._task: asyncio.Task | None = None
        self._settled = asyncio.Event()
        self._done = False

    ##########################################
    ################ GETTER ##################
    ##########################################

    @property
    def query(self) -> ScrollQuery:
        return self._query

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def reading(self) -> bool:
        return self._reading

    @property
    def emitted_count(self) -> int:
        return self._counter

    @property
    def expected_total(self) -> int:
        return self._total

    @property
    def object_mode(self) -> bool:
        return self._options.object_mode

    ##########################################
    ############### CONTROL ##################
    ##########################################

    def advance(self) -> None:
        """Start producing records, unless a request is already in flight.

        Must be called from a running event loop. Pulling a stream that has
        already ended or failed does nothing.
        """
        if self._reading:
            return
        if self._state in (StreamState.ENDED, StreamState.FAILED):
            self.logging.debug("Ignoring pull on %s scroll stream.", self._state.value)
            return

        self._reading = True
        self._state = StreamState.ACTIVE
        self._task = asyncio.get_running_loop().create_task(self._produce())

    def close(self) -> None:
        """Request a stop at the next page boundary.

        The request in flight, if any, completes normally and its hits are
        still emitted; the stream then releases the scroll and ends instead
        of fetching the next page.
        """
        self._force_close = True

    async def wait_closed(self) -> None:
        """Wait until the current scroll lifecycle has ended or failed."""
        if self._task is None:
            return
        await self._settled.wait()

    ##########################################
    ############### ITERATION ################
    ##########################################

    def __aiter__(self) -> "ScrollStream":
        return self

    async def __anext__(self) -> dict | str:
        if self._done:
            raise StopAsyncIteration
        if self._queue.empty():
            self.advance()

        item = await self._queue.get()
        if item is _END:
            self._done = True
            raise StopAsyncIteration
        if isinstance(item, ScrollStreamError):
            self._done = True
            raise item
        return item

    ##########################################
    ############### PRODUCER #################
    ##########################################

    async def _produce(self) -> None:
        try:
            await self._scroll_until_done()
        except Exception as e:
            self.logging.exception("Scroll stream failed unexpectedly: %s", e)
            error = ScrollStreamError(f"Scroll stream failed unexpectedly: {e}", total=self._total, counter=self._counter)
            error.__cause__ = e
            self._fail(error)

    async def _scroll_until_done(self) -> None:
        try:
            response = await self._client.do_search(self._query)
        except Exception as e:
            self._fail(ScrollClientError(f"Search request failed: {e}", cause=e, total=self._total, counter=self._counter))
            return

        while True:
            try:
                page = ScrollPage.from_response(response)
            except ValueError as e:
                self._fail(ScrollClientError(f"Invalid search response: {e}", cause=e, total=self._total, counter=self._counter))
                return

            self._total = page.total

            if page.timed_out:
                self._fail(ScrollTimeoutError("Scroll request timed out", total=self._total, counter=self._counter))
                return

            if page.failed_shards > 0:
                self._fail(ShardFailureError("At least one shard failed", shards=page.shards, total=self._total, counter=self._counter))
                return

            if not page.hits and self._counter < self._total:
                missing = self._total - self._counter
                self.logging.warning("Read 0 (%d/%d)", self._counter, self._total)
                self._fail(IncompleteResultError(
                    f"No more hits. Expected {missing} more objects. Closing stream.",
                    missing=missing,
                    total=self._total,
                    counter=self._counter,
                ))
                return

            for hit in page.hits:
                record = self._build_record(hit)
                self._queue.put_nowait(record if self._options.object_mode else json.dumps(record))
                self._counter += 1

            self.logging.info("Read %d (%d/%d)", len(page.hits), self._counter, self._total)

            # an empty page with nothing missing ends the scroll as well
            if page.hits and self._total != self._counter and not self._force_close:
                try:
                    response = await self._client.do_scroll(self._query.scroll, page.scroll_id)
                except Exception as e:
                    self._fail(ScrollClientError(f"Scroll request failed: {e}", cause=e, total=self._total, counter=self._counter))
                    return
                continue

            self._state = StreamState.DRAINING
            await self._release(page.scroll_id)
            asyncio.get_running_loop().call_soon(self._finish)
            return

    def _build_record(self, hit: dict) -> dict:
        base = hit.get("fields")
        if base is None:
            base = hit.get("_source") or {}
        record = dict(base)
        for field in self._optional_fields:
            record[field] = hit.get(field)
        return record

    async def _release(self, scroll_id: str | None) -> None:
        if not scroll_id:
            return
        try:
            await self._client.do_clear_scroll([scroll_id])
        except Exception as e:
            self.logging.error("Failed to clear scroll context: %s", e)

    def _finish(self) -> None:
        if self._force_close and self._counter != self._total:
            self.logging.info("Scroll stream closed early after %d of %d records.", self._counter, self._total)
        else:
            self.logging.info("Scroll stream finished with %d records.", self._counter)
        self._reading = False
        self._counter = 0
        self._force_close = False
        self._state = StreamState.ENDED
        self._queue.put_nowait(_END)
        self._settled.set()

    def _fail(self, error: ScrollStreamError) -> None:
        self.logging.error("%s (%d/%d)", error.message, error.counter, error.total)
        self._reading = False
        self._state = StreamState.FAILED
        self._queue.put_nowait(error)
        self._settled.set()

"""Shared fixtures: a scripted in-memory search client and page builders."""

import asyncio
import logging

import pytest

from escroll.helper.HelperConfig import HelperConfig


def make_hit(n: int, **meta) -> dict:
    hit = {"_index": "logs", "_id": str(n), "_score": 1.0, "_source": {"n": n}}
    hit.update(meta)
    return hit


def make_page(hits: list[dict], total, scroll_id: str = "s1", timed_out: bool = False, failed: int = 0) -> dict:
    return {
        "_scroll_id": scroll_id,
        "took": 1,
        "timed_out": timed_out,
        "_shards": {"total": 2, "successful": 2 - failed, "skipped": 0, "failed": failed},
        "hits": {"total": total, "max_score": 1.0, "hits": hits},
    }


class FakeSearchClient:
    """Replays scripted responses and records every call made by a stream.

    A scripted item that is an exception is raised instead of returned. When a
    gate is given, each request waits for it after signalling `entered`.
    """

    def __init__(self, responses: list, gate: asyncio.Event | None = None, clear_error: Exception | None = None):
        self.responses = list(responses)
        self.gate = gate
        self.clear_error = clear_error
        self.entered = asyncio.Event()
        self.search_calls: list = []
        self.scroll_calls: list = []
        self.clear_calls: list = []

    def get_engine_name(self) -> str:
        return "fake"

    async def do_search(self, query):
        self.search_calls.append(query)
        return await self._next()

    async def do_scroll(self, scroll: str, scroll_id: str):
        self.scroll_calls.append((scroll, scroll_id))
        return await self._next()

    async def do_clear_scroll(self, scroll_ids: list[str]):
        self.clear_calls.append(scroll_ids)
        if self.clear_error is not None:
            raise self.clear_error
        return {"succeeded": True, "num_freed": len(scroll_ids)}

    async def _next(self):
        self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def helper_config(monkeypatch) -> HelperConfig:
    monkeypatch.delenv("SCROLL_KEEP_ALIVE", raising=False)
    monkeypatch.delenv("SCROLL_OPTIONAL_FIELDS", raising=False)
    monkeypatch.delenv("SCROLL_PAGE_SIZE", raising=False)
    return HelperConfig(logger=logging.getLogger("escroll.tests"))

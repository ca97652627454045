"""Tests for the scroll export runner."""

import asyncio
import io
import json

import pytest

from conftest import FakeSearchClient, make_hit, make_page
from escroll.clients.search.models.ScrollQuery import ScrollQuery
from escroll.stream.errors import ShardFailureError
from services.scroll_export.scroll_export import run_export


class TestRunExport:

    @pytest.mark.asyncio
    async def test_writes_one_line_per_document(self, helper_config, monkeypatch) -> None:
        monkeypatch.setenv("SCROLL_OPTIONAL_FIELDS", "[_id]")
        monkeypatch.setenv("SCROLL_PAGE_SIZE", "2")
        search_client = FakeSearchClient([
            make_page([make_hit(0), make_hit(1)], total=3, scroll_id="s1"),
            make_page([make_hit(2)], total=3, scroll_id="s2"),
        ])
        out = io.StringIO()

        exported = await run_export(helper_config, search_client, ScrollQuery(index="logs"), out=out)

        assert exported == 3
        assert [json.loads(line)["_id"] for line in out.getvalue().splitlines()] == ["0", "1", "2"]
        assert search_client.search_calls[0].size == 2

    @pytest.mark.asyncio
    async def test_propagates_stream_errors(self, helper_config) -> None:
        search_client = FakeSearchClient([make_page([make_hit(0)], total=1, failed=1)])

        with pytest.raises(ShardFailureError):
            await run_export(helper_config, search_client, ScrollQuery(), out=io.StringIO())

    @pytest.mark.asyncio
    async def test_failing_writer_releases_scroll(self, helper_config) -> None:
        scroll_gate = asyncio.Event()

        class GatedScrollClient(FakeSearchClient):
            async def do_scroll(self, scroll: str, scroll_id: str):
                await scroll_gate.wait()
                return await super().do_scroll(scroll, scroll_id)

        class BrokenPipe:
            def write(self, line: str) -> None:
                scroll_gate.set()
                raise BrokenPipeError("stdout closed")

        search_client = GatedScrollClient([
            make_page([make_hit(0), make_hit(1)], total=4, scroll_id="s1"),
            make_page([make_hit(2)], total=4, scroll_id="s2"),
            make_page([make_hit(3)], total=4, scroll_id="s3"),
        ])

        with pytest.raises(BrokenPipeError):
            await run_export(helper_config, search_client, ScrollQuery(), out=BrokenPipe())

        assert len(search_client.scroll_calls) == 1
        assert search_client.clear_calls == [["s2"]]

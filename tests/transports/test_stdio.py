"""Tests for the stdio transport."""

from __future__ import annotations

import io
import json
from unittest.mock import AsyncMock, MagicMock

from accessaudit.protocol.router import build_router
from accessaudit.transports.stdio import StdioServer


async def _serve(*lines: str) -> list[dict]:
    reader = io.StringIO("".join(f"{line}\n" for line in lines))
    writer = io.StringIO()
    await StdioServer(build_router(), reader, writer).run()
    return [json.loads(line) for line in writer.getvalue().splitlines()]


class TestStdioServer:
    async def test_one_reply_per_request(self) -> None:
        replies = await _serve(
            '{"jsonrpc": "2.0", "id": 1, "method": "initialize"}',
            '{"jsonrpc": "2.0", "id": 2, "method": "tools/list"}',
        )
        assert [r["id"] for r in replies] == [1, 2]
        assert replies[0]["result"]["protocolVersion"] == "2024-11-05"
        assert len(replies[1]["result"]["tools"]) == 5

    async def test_blank_lines_and_notifications_are_silent(self) -> None:
        replies = await _serve(
            "",
            '{"jsonrpc": "2.0", "method": "notifications/initialized"}',
            '{"jsonrpc": "2.0", "id": 3, "method": "ping"}',
        )
        assert replies == [{"jsonrpc": "2.0", "id": 3, "result": {}}]

    async def test_parse_error_keeps_serving(self) -> None:
        replies = await _serve("{oops", '{"id": 4, "method": "ping"}')
        assert replies[0]["error"]["code"] == -32700
        assert replies[1]["id"] == 4

    async def test_deeply_nested_line_keeps_serving(self) -> None:
        replies = await _serve("[" * 100_000, '{"id": 4, "method": "ping"}')
        assert replies[0]["id"] is None
        assert replies[0]["error"]["code"] == -32700
        assert replies[1] == {"jsonrpc": "2.0", "id": 4, "result": {}}

    async def test_router_failure_does_not_stop_serving(self) -> None:
        router = MagicMock()
        router.handle_text = AsyncMock(side_effect=[RuntimeError("boom"), {"id": 2}])
        writer = io.StringIO()
        await StdioServer(router, io.StringIO("first\nsecond\n"), writer).run()
        assert writer.getvalue() == '{"id": 2}\n'
        assert router.handle_text.await_count == 2

    async def test_batch_line(self) -> None:
        replies = await _serve('[{"id": 1, "method": "ping"}, {"id": 2, "method": "ping"}]')
        assert len(replies) == 1
        assert [r["id"] for r in replies[0]] == [1, 2]

    async def test_stops_at_eof(self) -> None:
        assert await _serve() == []

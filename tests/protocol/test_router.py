"""Tests for ProtocolRouter request handling."""

from __future__ import annotations

import asyncio
import json
from typing import Any
from unittest.mock import AsyncMock

from accessaudit.config import ServerSettings
from accessaudit.protocol.router import ProtocolRouter, build_router
from accessaudit.tools.dispatcher import ToolDispatcher
from accessaudit.tools.registry import ToolRegistry


def _call(name: str, arguments: dict[str, Any] | None = None, id: int = 1) -> dict[str, Any]:
    params: dict[str, Any] = {"name": name}
    if arguments is not None:
        params["arguments"] = arguments
    return {"jsonrpc": "2.0", "id": id, "method": "tools/call", "params": params}


def _tool_result(wire: Any) -> Any:
    content = wire["result"]["content"]
    assert content[0]["type"] == "text"
    return json.loads(content[0]["text"])


class TestLifecycleMethods:
    async def test_initialize(self) -> None:
        router = build_router()
        wire = await router.handle_text(
            json.dumps({"jsonrpc": "2.0", "id": 0, "method": "initialize"})
        )
        assert wire == {
            "jsonrpc": "2.0",
            "id": 0,
            "result": {
                "protocolVersion": "2024-11-05",
                "capabilities": {"tools": {}},
                "serverInfo": {"name": "accessaudit-server", "version": "0.1.0"},
            },
        }

    async def test_initialize_uses_settings(self) -> None:
        router = build_router(ServerSettings(name="custom", protocol_version="2025-03-26"))
        wire = await router.handle_text('{"id": 1, "method": "initialize"}')
        assert wire["result"]["serverInfo"]["name"] == "custom"
        assert wire["result"]["protocolVersion"] == "2025-03-26"

    async def test_ping(self) -> None:
        wire = await build_router().handle_text('{"id": 7, "method": "ping"}')
        assert wire == {"jsonrpc": "2.0", "id": 7, "result": {}}

    async def test_tools_list(self) -> None:
        wire = await build_router().handle_text('{"id": "x", "method": "tools/list"}')
        assert wire["id"] == "x"
        names = [t["name"] for t in wire["result"]["tools"]]
        assert names == [
            "audit_html",
            "audit_page",
            "filter_outcomes",
            "get_rule_info",
            "list_rules",
        ]
        assert "inputSchema" in wire["result"]["tools"][0]


class TestToolsCall:
    async def test_result_is_wrapped_as_text_content(self) -> None:
        wire = await build_router().handle_payload(_call("list_rules", {}))
        assert wire is not None
        result = _tool_result(wire.to_wire())
        assert result["count"] == 10

    async def test_list_rules_is_idempotent(self) -> None:
        router = build_router()
        request = json.dumps(_call("list_rules", {}))
        first = await router.handle_text(request)
        second = await router.handle_text(request)
        assert json.dumps(first) == json.dumps(second)

    async def test_arguments_default_to_empty_object(self) -> None:
        wire = await build_router().handle_text(json.dumps(_call("list_rules")))
        assert _tool_result(wire)["count"] == 10

    async def test_audit_html(self) -> None:
        wire = await build_router().handle_text(
            json.dumps(_call("audit_html", {"html": "<html><body><img></body></html>"}))
        )
        result = _tool_result(wire)
        assert result["summary"]["total"] == 10
        assert result["summary"]["counts"]["failed"] == 3

    async def test_unknown_tool(self) -> None:
        wire = await build_router().handle_text(json.dumps(_call("nope", {})))
        assert wire == {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {
                "code": -32000,
                "message": "Unknown tool: nope",
                "data": {"kind": "NotFound"},
            },
        }

    async def test_bad_arguments(self) -> None:
        wire = await build_router().handle_text(json.dumps(_call("audit_html", {})))
        assert wire["error"]["code"] == -32000
        assert wire["error"]["data"] == {"kind": "BadInput"}

    async def test_missing_name_is_invalid_params(self) -> None:
        wire = await build_router().handle_text(
            '{"id": 3, "method": "tools/call", "params": {"arguments": {}}}'
        )
        assert wire["id"] == 3
        assert wire["error"]["code"] == -32602

    async def test_non_object_arguments_is_invalid_params(self) -> None:
        wire = await build_router().handle_text(
            '{"id": 3, "method": "tools/call", "params": {"name": "list_rules", "arguments": [1]}}'
        )
        assert wire["error"]["code"] == -32602

    async def test_unexpected_error_is_reported(self) -> None:
        registry = ToolRegistry()
        handlers = {name: AsyncMock(side_effect=RuntimeError("kaput")) for name in registry.names()}
        router = ProtocolRouter(ToolDispatcher(registry, handlers))

        wire = await router.handle_text(json.dumps(_call("list_rules", {})))
        assert wire["error"] == {
            "code": -32000,
            "message": "kaput",
            "data": {"kind": "InternalError"},
        }


class TestEnvelopeErrors:
    async def test_unknown_method(self) -> None:
        wire = await build_router().handle_text('{"id": 5, "method": "resources/list"}')
        assert wire == {
            "jsonrpc": "2.0",
            "id": 5,
            "error": {"code": -32601, "message": "Method not found: resources/list"},
        }

    async def test_parse_error(self) -> None:
        wire = await build_router().handle_text("{not json")
        assert wire["id"] is None
        assert wire["error"]["code"] == -32700

    async def test_non_object_envelope(self) -> None:
        wire = await build_router().handle_text("42")
        assert wire["id"] is None
        assert wire["error"]["code"] == -32600

    async def test_missing_method_keeps_id(self) -> None:
        wire = await build_router().handle_text('{"id": 9}')
        assert wire["id"] == 9
        assert wire["error"]["code"] == -32600

    async def test_notification_gets_no_reply(self) -> None:
        assert await build_router().handle_text('{"jsonrpc": "2.0", "method": "ping"}') is None

    async def test_failing_notification_gets_no_reply(self) -> None:
        assert await build_router().handle_text('{"method": "nope"}') is None


class TestBatches:
    async def test_replies_follow_request_order(self) -> None:
        batch = [
            _call("list_rules", {}, id=1),
            {"jsonrpc": "2.0", "id": 2, "method": "ping"},
            {"jsonrpc": "2.0", "id": 3, "method": "nope"},
            _call("audit_html", {"html": "<p>hi</p>"}, id=4),
        ]
        wire = await build_router().handle_text(json.dumps(batch))
        assert [r["id"] for r in wire] == [1, 2, 3, 4]
        assert "result" in wire[0]
        assert wire[2]["error"]["code"] == -32601

    async def test_notifications_are_dropped_from_batch(self) -> None:
        batch = [{"method": "ping"}, {"id": 1, "method": "ping"}]
        wire = await build_router().handle_text(json.dumps(batch))
        assert wire == [{"jsonrpc": "2.0", "id": 1, "result": {}}]

    async def test_empty_batch(self) -> None:
        assert await build_router().handle_text("[]") == []

    async def test_invalid_members_do_not_affect_others(self) -> None:
        wire = await build_router().handle_text('[1, {"id": 2, "method": "ping"}]')
        assert wire[0]["error"]["code"] == -32600
        assert wire[1] == {"jsonrpc": "2.0", "id": 2, "result": {}}

    async def test_unknown_tool_in_batch_leaves_siblings_intact(self) -> None:
        batch = [
            _call("list_rules", {}, id=1),
            _call("no_such_tool", {}, id=2),
            _call("get_rule_info", {"ruleId": "R1"}, id=3),
        ]
        wire = await build_router().handle_text(json.dumps(batch))

        assert [r["id"] for r in wire] == [1, 2, 3]
        assert "result" in wire[0] and "error" not in wire[0]
        assert wire[1]["error"]["code"] == -32000
        assert wire[1]["error"]["data"] == {"kind": "NotFound"}
        assert "result" in wire[2] and "error" not in wire[2]
        assert _tool_result(wire[2])["code"] == "R1"

    async def test_order_is_positional_not_completion_order(self) -> None:
        registry = ToolRegistry()
        released = asyncio.Event()
        finished: list[str] = []

        async def slow(arguments: dict[str, Any]) -> dict[str, Any]:
            await released.wait()
            finished.append("slow")
            return {"tool": "slow"}

        async def fast(arguments: dict[str, Any]) -> dict[str, Any]:
            released.set()
            finished.append("fast")
            return {"tool": "fast"}

        handlers: dict[str, Any] = {name: AsyncMock() for name in registry.names()}
        handlers["audit_html"] = slow
        handlers["audit_page"] = fast
        router = ProtocolRouter(ToolDispatcher(registry, handlers))

        batch = [_call("audit_html", {}, id=1), _call("audit_page", {}, id=2)]
        wire = await router.handle_text(json.dumps(batch))

        assert finished == ["fast", "slow"]
        assert [r["id"] for r in wire] == [1, 2]
        assert [_tool_result(r)["tool"] for r in wire] == ["slow", "fast"]

"""ProtocolRouter — transport-independent JSON-RPC request handling.

Every transport hands the router a decoded payload (or raw text) and writes
back whatever it returns.  The router validates envelopes, serves
``initialize``, ``ping``, ``tools/list`` and ``tools/call``, maps failures to
error objects and runs batches concurrently while keeping request order.

None of the public ``handle*`` coroutines raise: every failure becomes an
error response.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from pydantic import ValidationError

from accessaudit import __version__
from accessaudit.config import ServerSettings
from accessaudit.dom.parser import HtmlParser
from accessaudit.engine.engine import EvaluationEngine
from accessaudit.errors import (
    PARSE_ERROR,
    TOOL_EXECUTION_ERROR,
    AuditError,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ProtocolError,
)
from accessaudit.protocol.models import JsonRpcRequest, JsonRpcResponse, RequestId
from accessaudit.tools.dispatcher import ToolDispatcher
from accessaudit.tools.executors import AuditTools
from accessaudit.tools.models import ToolCall
from accessaudit.utils.telemetry import (
    ATTR_BATCH_SIZE,
    ATTR_ERROR_KIND,
    ATTR_METHOD,
    ATTR_TOOL_NAME,
    get_tracer,
)
from accessaudit.utils.validation import describe_validation_error

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

Reply = JsonRpcResponse | list[JsonRpcResponse] | None


class ProtocolRouter:
    """Routes JSON-RPC envelopes to tool executors.

    Usage::

        router = build_router()
        reply = await router.handle_text('{"id": 1, "method": "tools/list"}')
    """

    def __init__(
        self,
        dispatcher: ToolDispatcher,
        *,
        server_name: str = "accessaudit-server",
        server_version: str = __version__,
        protocol_version: str = "2024-11-05",
    ) -> None:
        self._dispatcher = dispatcher
        self._server_name = server_name
        self._server_version = server_version
        self._protocol_version = protocol_version

    @property
    def dispatcher(self) -> ToolDispatcher:
        return self._dispatcher

    async def handle_text(self, raw: str | bytes) -> dict[str, Any] | list[dict[str, Any]] | None:
        """Decode *raw* JSON, handle it and return the wire form of the reply."""
        try:
            payload = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            logger.warning("Rejected undecodable payload: %s", exc)
            return JsonRpcResponse.failure(None, PARSE_ERROR, f"Parse error: {exc}").to_wire()
        return to_wire(await self.handle_payload(payload))

    async def handle_payload(self, payload: Any) -> Reply:
        """Handle a decoded single envelope or batch array."""
        if isinstance(payload, list):
            return await self.handle_batch(payload)
        return await self.handle(payload)

    async def handle_batch(self, messages: list[Any]) -> list[JsonRpcResponse]:
        """Handle every envelope concurrently; responses follow request order."""
        with _tracer.start_as_current_span("accessaudit.batch") as span:
            span.set_attribute(ATTR_BATCH_SIZE, len(messages))
            replies = await asyncio.gather(*(self.handle(message) for message in messages))
        return [reply for reply in replies if reply is not None]

    async def handle(self, message: Any) -> JsonRpcResponse | None:
        """Handle one envelope; ``None`` for notifications."""
        request_id = _peek_id(message)
        try:
            request = _validate(message)
        except ProtocolError as exc:
            logger.warning("Invalid envelope: %s", exc)
            return JsonRpcResponse.failure(request_id, exc.code, str(exc))

        with _tracer.start_as_current_span("accessaudit.request") as span:
            span.set_attribute(ATTR_METHOD, request.method)
            try:
                result = await self._dispatch(request)
            except ProtocolError as exc:
                span.set_attribute(ATTR_ERROR_KIND, exc.kind)
                response = JsonRpcResponse.failure(request.id, exc.code, str(exc))
            except AuditError as exc:
                span.set_attribute(ATTR_ERROR_KIND, exc.kind)
                logger.info("%s failed (%s): %s", request.method, exc.kind, exc)
                response = JsonRpcResponse.failure(
                    request.id, TOOL_EXECUTION_ERROR, str(exc), {"kind": exc.kind}
                )
            except Exception as exc:
                span.set_attribute(ATTR_ERROR_KIND, "InternalError")
                logger.exception("Unhandled error while serving %s", request.method)
                response = JsonRpcResponse.failure(
                    request.id,
                    TOOL_EXECUTION_ERROR,
                    str(exc) or exc.__class__.__name__,
                    {"kind": "InternalError"},
                )
            else:
                response = JsonRpcResponse.success(request.id, result)

        if request.is_notification:
            return None
        return response

    async def _dispatch(self, request: JsonRpcRequest) -> Any:
        if request.method == "initialize":
            return self._initialize_result()
        if request.method == "ping":
            return {}
        if request.method == "tools/list":
            return {"tools": [tool.to_json() for tool in self._dispatcher.all_tools()]}
        if request.method == "tools/call":
            return await self._call_tool(request.params or {})
        raise MethodNotFoundError(request.method)

    def _initialize_result(self) -> dict[str, Any]:
        return {
            "protocolVersion": self._protocol_version,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": self._server_name, "version": self._server_version},
        }

    async def _call_tool(self, params: dict[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("'name' must be a non-empty string")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("'arguments' must be an object")

        with _tracer.start_as_current_span("accessaudit.tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            result = await self._dispatcher.execute(ToolCall(name=name, arguments=arguments))

        return {"content": [{"type": "text", "text": json.dumps(result, indent=2)}]}


def _peek_id(message: Any) -> RequestId | None:
    if isinstance(message, dict):
        candidate = message.get("id")
        if isinstance(candidate, (int, str)) and not isinstance(candidate, bool):
            return candidate
    return None


def _validate(message: Any) -> JsonRpcRequest:
    if not isinstance(message, dict):
        raise InvalidRequestError("envelope must be a JSON object")
    try:
        return JsonRpcRequest.model_validate(message)
    except ValidationError as exc:
        raise InvalidRequestError(describe_validation_error(exc)) from exc


def to_wire(reply: Reply) -> dict[str, Any] | list[dict[str, Any]] | None:
    """Serialize a router reply for a transport."""
    if reply is None:
        return None
    if isinstance(reply, list):
        return [response.to_wire() for response in reply]
    return reply.to_wire()


def build_router(
    settings: ServerSettings | None = None,
    *,
    engine: EvaluationEngine | None = None,
    parser: HtmlParser | None = None,
) -> ProtocolRouter:
    """Wire the default executors, dispatcher and router from *settings*."""
    settings = settings or ServerSettings()
    tools = AuditTools(engine, parser, default_url=settings.default_url)
    return ProtocolRouter(
        ToolDispatcher.from_tools(tools),
        server_name=settings.name,
        server_version=settings.version,
        protocol_version=settings.protocol_version,
    )

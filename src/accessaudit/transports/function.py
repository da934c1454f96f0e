"""Function-invocation transport — one event in, one HTTP-shaped reply out.

Fits serverless runtimes that call ``handler(event, context)`` with an API
gateway style event.  The body may be a JSON string (optionally base64
encoded), an already decoded object/array, or the event itself.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
from typing import TYPE_CHECKING, Any

from accessaudit.config import ServerSettings, load_settings
from accessaudit.errors import PARSE_ERROR, UNAUTHORIZED
from accessaudit.protocol.models import JsonRpcResponse
from accessaudit.protocol.router import build_router, to_wire
from accessaudit.transports.auth import is_authorized

if TYPE_CHECKING:
    from accessaudit.protocol.router import ProtocolRouter

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


class FunctionHandler:
    """Callable handling one invocation event against a :class:`ProtocolRouter`."""

    def __init__(self, router: ProtocolRouter, settings: ServerSettings) -> None:
        self._router = router
        self._settings = settings

    def __call__(self, event: dict[str, Any], context: Any = None) -> dict[str, Any]:
        headers = event.get("headers") or {}
        if not is_authorized(headers, self._settings.api_key):
            logger.warning("Rejected invocation with a missing or invalid API key")
            return _reply(
                401,
                JsonRpcResponse.failure(
                    None,
                    UNAUTHORIZED,
                    "Unauthorized: Invalid or missing API key. "
                    "Use 'Authorization: Bearer <key>' or 'X-Api-Key: <key>' header.",
                ).to_wire(),
            )

        try:
            payload = _extract_body(event)
        except ValueError as exc:
            logger.warning("Rejected undecodable event body: %s", exc)
            return _reply(
                400, JsonRpcResponse.failure(None, PARSE_ERROR, f"Parse error: {exc}").to_wire()
            )

        reply = to_wire(asyncio.run(self._router.handle_payload(payload)))
        if reply is None:
            return {"statusCode": 204, "headers": dict(_JSON_HEADERS), "body": ""}
        return _reply(200, reply)


def _extract_body(event: dict[str, Any]) -> Any:
    if "body" not in event:
        return event
    body = event["body"]
    if not isinstance(body, (str, bytes)):
        return body
    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body)
        except binascii.Error as exc:
            raise ValueError(f"invalid base64 body: {exc}") from exc
    try:
        return json.loads(body)
    except (ValueError, RecursionError) as exc:
        raise ValueError(str(exc)) from exc


def _reply(status_code: int, body: Any) -> dict[str, Any]:
    return {"statusCode": status_code, "headers": dict(_JSON_HEADERS), "body": json.dumps(body)}


_default_handler: FunctionHandler | None = None


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Module-level entrypoint; settings come from the environment on first use."""
    global _default_handler
    if _default_handler is None:
        settings = load_settings()
        _default_handler = FunctionHandler(build_router(settings), settings)
    return _default_handler(event, context)
